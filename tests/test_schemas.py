"""Unit tests for request schemas: node bounds and types, pipe shapes and flow, update flattening."""

import unittest

from pydantic import ValidationError

from waternet.core.bounds import within_bounds
from waternet.schemas.node import Location, NodeCreate, NodeSearchParams, NodeUpdate
from waternet.schemas.pipe import GeometricPipeCreate, PipeUpdate, ReferentialPipeCreate


def _node(**overrides: object) -> dict[str, object]:
    body: dict[str, object] = {
        "name": "Spring A",
        "type": "source",
        "location": {"latitude": 39.0, "longitude": 19.9},
    }
    body.update(overrides)
    return body


class TestBounds(unittest.TestCase):
    def test_inside_and_edges(self) -> None:
        self.assertTrue(within_bounds(39.0, 19.9))
        self.assertTrue(within_bounds(38.5, 19.3))
        self.assertTrue(within_bounds(39.8, 20.3))

    def test_outside(self) -> None:
        self.assertFalse(within_bounds(40.0, 19.9))
        self.assertFalse(within_bounds(39.0, 20.31))
        self.assertFalse(within_bounds(38.49, 19.9))

    def test_location_rejects_out_of_bounds(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            Location(latitude=40.0, longitude=19.9)
        self.assertIn("network bounds", str(ctx.exception))

    def test_location_accepts_in_bounds(self) -> None:
        self.assertEqual(Location(latitude=39.0, longitude=19.9).latitude, 39.0)


class TestNodeCreate(unittest.TestCase):
    def test_defaults(self) -> None:
        node = NodeCreate.model_validate(_node())
        self.assertEqual(node.status, "active")
        self.assertEqual(node.description, "")
        self.assertIsNone(node.capacity)

    def test_blank_status_becomes_active(self) -> None:
        self.assertEqual(NodeCreate.model_validate(_node(status="  ")).status, "active")

    def test_bad_status_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            NodeCreate.model_validate(_node(status="broken"))

    def test_localized_type_accepted(self) -> None:
        self.assertEqual(NodeCreate.model_validate(_node(type="Κλειδί")).type, "Κλειδί")

    def test_unknown_type_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            NodeCreate.model_validate(_node(type="fountain"))

    def test_out_of_bounds_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            NodeCreate.model_validate(_node(location={"latitude": 40.0, "longitude": 19.9}))

    def test_blank_name_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            NodeCreate.model_validate(_node(name="   "))
        self.assertEqual(NodeCreate.model_validate(_node(name=" Tee 4 ")).name, "Tee 4")

    def test_non_finite_capacity_rejected(self) -> None:
        for capacity in (float("inf"), float("nan")):
            with self.assertRaises(ValidationError):
                NodeCreate.model_validate(_node(capacity=capacity))


class TestNodeUpdate(unittest.TestCase):
    def test_only_sent_fields_are_changes(self) -> None:
        update = NodeUpdate.model_validate({"name": "Renamed"})
        self.assertEqual(update.to_column_changes(), {"name": "Renamed"})

    def test_location_is_flattened(self) -> None:
        update = NodeUpdate.model_validate({"location": {"latitude": 39.5, "longitude": 20.0}})
        self.assertEqual(update.to_column_changes(), {"latitude": 39.5, "longitude": 20.0})

    def test_identity_field_is_ignored(self) -> None:
        update = NodeUpdate.model_validate({"id": 99, "_id": 99, "capacity": 5})
        self.assertEqual(update.to_column_changes(), {"capacity": 5})

    def test_explicit_null_capacity_clears_it(self) -> None:
        update = NodeUpdate.model_validate({"capacity": None, "name": None})
        self.assertEqual(update.to_column_changes(), {"capacity": None})

    def test_out_of_bounds_location_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            NodeUpdate.model_validate({"location": {"latitude": 39.0, "longitude": 21.0}})


class TestNodeSearchParams(unittest.TestCase):
    def test_comma_separated_types(self) -> None:
        params = NodeSearchParams(types="source, junction,,")
        self.assertEqual(params.types, ["source", "junction"])

    def test_empty_types_means_no_filter(self) -> None:
        self.assertIsNone(NodeSearchParams(types=" , ").types)


class TestGeometricPipe(unittest.TestCase):
    TWO_POINTS = [
        {"latitude": 39.6, "longitude": 19.9},
        {"latitude": 39.61, "longitude": 19.91},
    ]

    def test_single_coordinate_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            GeometricPipeCreate.model_validate(
                {"kind": "geometric", "coordinates": self.TWO_POINTS[:1], "flow": 0}
            )

    def test_two_coordinates_with_direction_flag(self) -> None:
        for flow in (0, 1):
            pipe = GeometricPipeCreate.model_validate(
                {"kind": "geometric", "coordinates": self.TWO_POINTS, "flow": flow}
            )
            self.assertEqual(pipe.flow, flow)
            self.assertEqual(pipe.status, "normal")

    def test_other_flow_rejected(self) -> None:
        for flow in (2, -1, 0.5):
            with self.assertRaises(ValidationError):
                GeometricPipeCreate.model_validate(
                    {"kind": "geometric", "coordinates": self.TWO_POINTS, "flow": flow}
                )

    def test_flow_must_be_a_number(self) -> None:
        for flow in (True, False, "1", "0"):
            with self.assertRaises(ValidationError):
                GeometricPipeCreate.model_validate(
                    {"kind": "geometric", "coordinates": self.TWO_POINTS, "flow": flow}
                )

    def test_non_finite_coordinate_rejected(self) -> None:
        points = [{"latitude": float("inf"), "longitude": 19.9}, self.TWO_POINTS[1]]
        with self.assertRaises(ValidationError):
            GeometricPipeCreate.model_validate(
                {"kind": "geometric", "coordinates": points, "flow": 0}
            )

    def test_flow_required(self) -> None:
        with self.assertRaises(ValidationError):
            GeometricPipeCreate.model_validate({"kind": "geometric", "coordinates": self.TWO_POINTS})


class TestReferentialPipe(unittest.TestCase):
    def test_camel_case_node_fields(self) -> None:
        pipe = ReferentialPipeCreate.model_validate(
            {"kind": "referential", "startNode": 1, "endNode": 2, "flow": 12.5}
        )
        self.assertEqual((pipe.start_node, pipe.end_node, pipe.flow), (1, 2, 12.5))

    def test_negative_flow_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            ReferentialPipeCreate.model_validate(
                {"kind": "referential", "startNode": 1, "endNode": 2, "flow": -1}
            )


class TestPipeUpdate(unittest.TestCase):
    def test_node_fields_renamed_to_columns(self) -> None:
        update = PipeUpdate.model_validate({"startNode": 3, "material": "PVC"})
        self.assertEqual(update.to_column_changes(), {"start_node_id": 3, "material": "PVC"})

    def test_single_coordinate_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            PipeUpdate.model_validate({"coordinates": [{"latitude": 39.6, "longitude": 19.9}]})

    def test_flow_must_be_a_number(self) -> None:
        for flow in (True, "1"):
            with self.assertRaises(ValidationError):
                PipeUpdate.model_validate({"flow": flow})
        self.assertEqual(PipeUpdate.model_validate({"flow": 1}).flow, 1)

    def test_non_finite_length_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            PipeUpdate.model_validate({"length": float("nan")})

    def test_id_and_kind_are_not_fields(self) -> None:
        update = PipeUpdate.model_validate({"id": 5, "kind": "referential"})
        self.assertEqual(update.to_column_changes(), {})


if __name__ == "__main__":
    unittest.main()
