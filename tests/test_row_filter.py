import unittest
from typing import ClassVar, Optional

from pydantic import ValidationError
from sqlalchemy import select

from qscond.schemas.filters import NumberFilterSet, StringFilterSet
from qscond.schemas.row_filter import RowFilter
from tests.base import Person, PersonFilters, UserFilters, render, users


class _BareFilters(RowFilter):
    title: Optional[StringFilterSet] = None
    rank: Optional[NumberFilterSet] = None


class _TableFilters(RowFilter):
    SOURCE: ClassVar = users

    age: Optional[NumberFilterSet] = None


class RowFilterConditionTests(unittest.TestCase):
    def test_documented_example(self):
        filters = UserFilters.model_validate(
            {"age": {"lt": "50", "gte": "20"}, "name": {"contains": "John"}}
        )
        conds = filters.conditions()
        self.assertEqual([render(c) for c in conds], [
            "users.name LIKE '%John%'",
            "(users.age >= 20 AND users.age < 50)",
        ])

    def test_fields_follow_declaration_order(self):
        filters = UserFilters(score=NumberFilterSet(eq=1), name=StringFilterSet(eq="a"))
        self.assertEqual(
            render(filters.to_condition()),
            "users.name = 'a' AND users.score = 1",
        )

    def test_all_fields_unset_is_true(self):
        filters = UserFilters()
        self.assertEqual(filters.conditions(), [])
        self.assertEqual(render(filters.to_condition()), "true")

    def test_empty_filter_sets_are_skipped(self):
        filters = UserFilters(name=StringFilterSet(), age=NumberFilterSet(gt=3))
        self.assertEqual(render(filters.to_condition()), "users.age > 3")

    def test_aggregation_is_idempotent(self):
        filters = UserFilters(name=StringFilterSet(starts_with="J"), age=NumberFilterSet(lt=9, gt=1))
        first = filters.to_condition()
        second = filters.to_condition()
        self.assertTrue(first.compare(second))
        self.assertEqual(render(first), render(second))

    def test_bare_column_names_without_source(self):
        filters = _BareFilters(title=StringFilterSet(ends_with="x"), rank=NumberFilterSet(eq=2))
        self.assertEqual(render(filters.to_condition()), "title LIKE '%x' AND rank = 2")

    def test_columns_resolved_from_orm_model(self):
        filters = PersonFilters(age=NumberFilterSet(eq=35))
        stmt = select(Person.id).where(filters.to_condition())
        self.assertEqual(render(stmt), "SELECT _qs_people.id FROM _qs_people WHERE _qs_people.age = 35")

    def test_columns_resolved_from_table(self):
        self.assertIs(_TableFilters.column_for("age"), users.c.age)

    def test_unknown_field_is_rejected(self):
        with self.assertRaises(ValidationError):
            UserFilters.model_validate({"email": {"eq": "x"}})


class RowFilterListingConfigTests(unittest.TestCase):
    def test_sortable_fields(self):
        self.assertEqual(UserFilters.sortable_fields(), frozenset({"name", "age", "score"}))

    def test_max_limit(self):
        self.assertEqual(UserFilters.max_limit(), 100)
        self.assertEqual(PersonFilters.max_limit(), 2)

    def test_defaults(self):
        self.assertEqual(_BareFilters.sortable_fields(), frozenset())
        self.assertEqual(_BareFilters.max_limit(), 100)


if __name__ == "__main__":
    unittest.main()
