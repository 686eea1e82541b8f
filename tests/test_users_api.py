"""API tests for /api/user profile endpoints."""

import unittest

from sqlalchemy.exc import IntegrityError

from support import ADMIN, OPERATOR, ApiTestCase, DatabaseTestCase
from waternet.models import User


class TestUsers(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.auth_headers(ADMIN)
        self.operator = self.auth_headers(OPERATOR)
        self.operator_id = self.db.query(User).filter(User.email == OPERATOR["email"]).one().id

    def test_list_requires_admin(self) -> None:
        self.assertEqual(self.client.get("/api/user/users", headers=self.operator).status_code, 403)
        response = self.client.get("/api/user/users", headers=self.admin)
        self.assertEqual(response.status_code, 200)
        users = response.json()
        self.assertEqual([u["email"] for u in users], [ADMIN["email"], OPERATOR["email"]])
        self.assertNotIn("passwordHash", users[0])
        self.assertNotIn("password", users[0])

    def test_read_self(self) -> None:
        response = self.client.get(f"/api/user/{self.operator_id}", headers=self.operator)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Operator")
        self.assertIn("createdAt", response.json())

    def test_cannot_read_someone_else(self) -> None:
        admin_id = self.db.query(User).filter(User.email == ADMIN["email"]).one().id
        response = self.client.get(f"/api/user/{admin_id}", headers=self.operator)
        self.assertEqual(response.status_code, 403)

    def test_missing_user(self) -> None:
        self.assertEqual(self.client.get("/api/user/999", headers=self.admin).status_code, 404)

    def test_update_cannot_change_role(self) -> None:
        response = self.client.put(
            f"/api/user/{self.operator_id}",
            json={"name": "Field Operator", "role": "admin"},
            headers=self.operator,
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["message"], "User updated successfully")
        self.assertEqual(body["user"]["name"], "Field Operator")
        self.assertEqual(body["user"]["role"], "user")

    def test_update_password_rehashes(self) -> None:
        response = self.client.put(
            f"/api/user/{self.operator_id}",
            json={"password": "a-new-password"},
            headers=self.operator,
        )
        self.assertEqual(response.status_code, 200)
        self.login(dict(OPERATOR, password="a-new-password"))

    def test_update_duplicate_email(self) -> None:
        response = self.client.put(
            f"/api/user/{self.operator_id}",
            json={"email": ADMIN["email"]},
            headers=self.operator,
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Email already exists")

    def test_delete_is_admin_only(self) -> None:
        url = f"/api/user/{self.operator_id}"
        self.assertEqual(self.client.delete(url, headers=self.operator).status_code, 403)
        response = self.client.delete(url, headers=self.admin)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "User deleted successfully"})
        self.assertEqual(self.client.delete(url, headers=self.admin).status_code, 404)


class TestUserTable(DatabaseTestCase):
    def test_role_outside_known_roles_rejected(self) -> None:
        self.db.add(User(name="Ghost", email="ghost@waternet.io", password_hash="x", role="owner"))
        with self.assertRaises(IntegrityError):
            self.db.commit()
        self.db.rollback()


if __name__ == "__main__":
    unittest.main()
