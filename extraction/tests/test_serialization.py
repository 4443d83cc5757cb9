"""
Unit tests for models.py and serialization.py

Tests the wire shape of entities and JSON output.
"""

import json
import os
import tempfile
import unittest

from extraction.models import ClassEntity, ExtractionResult, InterfaceEntity, MethodEntity
from extraction.serialization import to_json, to_wire_dict, write_json


def sample_result():
    return ExtractionResult(
        classes=[
            ClassEntity(
                name="Repo",
                namespace="App.Models",
                attributes=("cache: int",),
                methods=(MethodEntity(name="Find", summary="Finds a record."),),
                dependencies=("int",),
                implements=("IRepo",),
            ),
        ],
        interfaces=[
            InterfaceEntity(name="IRepo", namespace="App.Models", methods=(MethodEntity(name="Find"),)),
        ],
    )


class TestEntityModels(unittest.TestCase):
    """Test entity invariants."""

    def test_empty_implements_becomes_none(self):
        self.assertIsNone(ClassEntity(name="Foo", implements=()).implements)

    def test_entities_are_frozen(self):
        entity = ClassEntity(name="Foo")
        with self.assertRaises(AttributeError):
            entity.name = "Bar"

    def test_class_wire_keys(self):
        data = ClassEntity(name="Foo").to_dict()
        self.assertEqual(
            list(data),
            ["name", "namespace", "summary", "attributes", "methods", "dependencies", "implements", "extends"],
        )
        self.assertIsNone(data["summary"])
        self.assertIsNone(data["implements"])
        self.assertIsNone(data["extends"])

    def test_method_wire_shape_has_no_call_edges(self):
        self.assertEqual(MethodEntity(name="Run").to_dict(), {"name": "Run", "summary": None})

    def test_result_extend_accepts_iterables(self):
        result = ExtractionResult()
        result.extend((ClassEntity(name=n) for n in ("A", "B")), iter([InterfaceEntity(name="IC")]))
        self.assertEqual([c.name for c in result.classes], ["A", "B"])
        self.assertEqual([i.name for i in result.interfaces], ["IC"])

    def test_result_extend_preserves_order(self):
        result = ExtractionResult()
        result.extend([ClassEntity(name="A")], [])
        result.extend([ClassEntity(name="B")], [InterfaceEntity(name="IC")])
        self.assertEqual([c.name for c in result.classes], ["A", "B"])
        self.assertEqual([i.name for i in result.interfaces], ["IC"])


class TestSerialization(unittest.TestCase):
    """Test JSON encoding of a result."""

    def test_to_wire_dict(self):
        data = to_wire_dict(sample_result())
        self.assertEqual(set(data), {"classes", "interfaces"})
        self.assertEqual(data["classes"][0]["implements"], ["IRepo"])
        self.assertIsNone(data["classes"][0]["extends"])
        self.assertEqual(data["interfaces"][0]["methods"], [{"name": "Find", "summary": None}])

    def test_nulls_are_written_not_omitted(self):
        text = to_json(sample_result())
        self.assertIn('"extends": null', text)
        self.assertIn('"summary": null', text)

    def test_non_ascii_is_preserved(self):
        result = ExtractionResult(classes=[ClassEntity(name="Überblick")])
        self.assertIn("Überblick", to_json(result))

    def test_empty_result(self):
        self.assertEqual(json.loads(to_json(ExtractionResult())), {"classes": [], "interfaces": []})

    def test_write_json_creates_directories(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "out", "nested", "model.json")
            written = write_json(sample_result(), path)
            self.assertEqual(written, os.path.abspath(path))
            with open(path, encoding="utf-8") as f:
                text = f.read()
            self.assertTrue(text.endswith("\n"))
            self.assertEqual(json.loads(text), to_wire_dict(sample_result()))


if __name__ == "__main__":
    unittest.main()
