"""
Unit tests for the data model: record decoding, criteria normalization
and catalog merging.
"""

import unittest

from coursefinder.model import Catalog, CourseRecord, SearchCriteria

from fakes import course_row


class TestCourseRecord(unittest.TestCase):
    def test_from_dict(self) -> None:
        rec = CourseRecord.from_dict(
            {"id": "CS101", "title": "Intro to Systems", "grade": "1", "credits": 3, "major": "CS", "schedule": None}
        )
        self.assertEqual(rec.id, "CS101")
        self.assertEqual(rec.grade, 1)
        self.assertEqual(rec.credits, "3")
        self.assertEqual(rec.schedule, "")

    def test_missing_id_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            CourseRecord.from_dict({"title": "No id", "grade": 1})

    def test_bad_grade_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            CourseRecord.from_dict({"id": "X1", "grade": "first"})

    def test_major_labels_treat_separator_literally(self) -> None:
        rec = CourseRecord.from_dict(course_row("X1", major="공과대학<p>컴퓨터공학과"))
        self.assertEqual(rec.major_label, "컴퓨터공학과")
        self.assertEqual(rec.major_display, "공과대학 컴퓨터공학과")


class TestSearchCriteria(unittest.TestCase):
    def test_replace_normalizes_values(self) -> None:
        c = SearchCriteria().replace("grades", ["1", "2"]).replace("times", 3).replace("credits", "")
        self.assertEqual(c.grades, frozenset({1, 2}))
        self.assertEqual(c.times, frozenset({3}))
        self.assertIsNone(c.credits)

    def test_unknown_field(self) -> None:
        with self.assertRaises(ValueError):
            SearchCriteria().replace("room", "x")

    def test_empty_criteria(self) -> None:
        self.assertTrue(SearchCriteria().is_empty)
        self.assertFalse(SearchCriteria(query="a").is_empty)


class TestCatalogMerge(unittest.TestCase):
    def test_later_partition_wins_duplicates(self) -> None:
        a = [CourseRecord.from_dict(course_row(i, title="from A")) for i in ("A1", "D1", "D2")]
        b = [CourseRecord.from_dict(course_row(i, title="from B")) for i in ("D2", "B1", "D1")]

        catalog = Catalog.merge(a, b)

        self.assertEqual(len(catalog), 4)
        by_id = {r.id: r for r in catalog}
        self.assertEqual(by_id["D1"].title, "from B")
        self.assertEqual(by_id["D2"].title, "from B")
        self.assertEqual(by_id["A1"].title, "from A")
        # first-seen position is kept
        self.assertEqual([r.id for r in catalog], ["A1", "D1", "D2", "B1"])

    def test_majors_first_seen_order(self) -> None:
        rows = [course_row("1", major="B"), course_row("2", major="A"), course_row("3", major="B")]
        catalog = Catalog.merge([CourseRecord.from_dict(r) for r in rows])
        self.assertEqual(catalog.majors(), ["B", "A"])

    def test_empty_catalog_is_falsy(self) -> None:
        self.assertFalse(Catalog())


if __name__ == "__main__":
    unittest.main()
