from qzh_preview.core.models import EntityEntry, EntityKind, Footnote, TooltipType, TransformContext


class TestTooltipType:
    """Test cases for TooltipType."""

    def test_german_labels(self):
        labels = {t.value: t.label for t in TooltipType}
        assert labels == {
            "person": "Person",
            "place": "Ort",
            "organization": "Organisation",
            "term": "Begriff",
            "textcritical": "Textkritisch",
            "abbr": "Abkürzung",
            "date": "Datum",
            "time": "Zeit",
            "duration": "Dauer",
            "highlight": "Hervorgehoben",
            "measure": "Maßangabe",
            "num": "Zahl",
            "note": "Anmerkung",
            "apparatus": "Lesarten",
            "figure": "Abbildung",
            "page": "Seite",
        }

    def test_entity_kinds_map_to_tooltip_types(self):
        assert EntityKind.PLACE.tooltip_type is TooltipType.PLACE
        assert EntityKind.ORGANIZATION.tooltip_type.label == "Organisation"


class TestTransformContext:
    """Test cases for TransformContext."""

    def test_footnotes_numbered_from_one(self):
        ctx = TransformContext()
        assert ctx.add_footnote("a") == 1
        assert ctx.add_footnote("b") == 2
        assert ctx.footnotes == [Footnote(1, "a"), Footnote(2, "b")]

    def test_entities_routed_by_kind(self):
        ctx = TransformContext()
        ctx.add_entity(EntityKind.TERM, EntityEntry(name="Zehnten"))
        ctx.add_entity(EntityKind.PERSON, EntityEntry(name="Hans", ref="p1"))
        assert ctx.terms == [EntityEntry(name="Zehnten")]
        assert ctx.persons[0].key == "p1"
