"""
Unit Tests for core.livingapps fields and record models.

Tests RecordField conversions and the declarative LivingAppsRecord base.
"""

from decimal import Decimal

import pytest

from core.livingapps import (
    FieldConversionError,
    FieldKind,
    LivingAppsRecord,
    RecordField,
)


class Room(LivingAppsRecord):
    _app_key = "rooms"
    
    name = RecordField("Name", required=True)
    seats = RecordField("Seats", FieldKind.INTEGER, required=True, min_value=1)
    rate = RecordField("Rate", FieldKind.DECIMAL, min_value=0, step="0.01")
    building = RecordField("Building", FieldKind.REFERENCE, reference_app="buildings")
    active = RecordField("Active", FieldKind.CHECKBOX)


BUILDING_ID = "65f0c0ffee0000000000b111"


def _url(app_key: str, record_id: str) -> str:
    return f"https://la.test/rest/apps/{app_key}/records/{record_id}"


class TestFieldKind:
    """Tests for FieldKind.input_type."""
    
    @pytest.mark.parametrize("kind,expected", [
        (FieldKind.TEXT, "text"),
        (FieldKind.EMAIL, "email"),
        (FieldKind.DATE, "date"),
        (FieldKind.INTEGER, "number"),
        (FieldKind.DECIMAL, "number"),
        (FieldKind.TEXTAREA, "textarea"),
        (FieldKind.REFERENCE, "select"),
        (FieldKind.CHECKBOX, "checkbox"),
    ])
    def test_input_type(self, kind, expected):
        assert kind.input_type == expected


class TestRecordFieldDefinition:
    """Tests for RecordField construction."""
    
    def test_reference_requires_app(self):
        with pytest.raises(ValueError):
            RecordField("Dozent", FieldKind.REFERENCE)
    
    def test_min_value_becomes_decimal(self):
        assert RecordField("x", FieldKind.INTEGER, min_value=1).min_value == Decimal("1")
    
    def test_metaclass_sets_names_in_order(self):
        assert list(Room.get_fields()) == ["name", "seats", "rate", "building", "active"]
        assert Room.get_field("seats").name == "seats"


class TestConvertValue:
    """Tests for API -> Python conversion."""
    
    def test_integer(self):
        assert Room.get_field("seats").convert_value("12") == 12
        assert Room.get_field("seats").convert_value("abc") is None
    
    def test_decimal_keeps_precision(self):
        assert Room.get_field("rate").convert_value(299.99) == Decimal("299.99")
    
    def test_checkbox(self):
        field = Room.get_field("active")
        
        assert field.convert_value(True) is True
        assert field.convert_value("true") is True
        assert field.convert_value(None) is False
    
    def test_empty_values_become_none(self):
        assert Room.get_field("name").convert_value("") is None
        assert Room.get_field("rate").convert_value(None) is None


class TestDraftConversion:
    """Tests for draft handling."""
    
    def test_to_draft(self):
        assert Room.get_field("seats").to_draft(20) == "20"
        assert Room.get_field("rate").to_draft(Decimal("99.50")) == "99.50"
        assert Room.get_field("name").to_draft(None) == ""
        assert Room.get_field("active").to_draft(None) is False
    
    def test_reference_to_draft_is_bare_id(self):
        field = Room.get_field("building")
        record_id = "65f0c0ffee0000000000abcd"
        
        assert field.to_draft(_url("b", record_id)) == record_id
        assert field.to_draft("garbage") == ""
    
    def test_parse_draft_strips_and_reads_checkbox(self):
        assert Room.get_field("name").parse_draft("  A  ") == "A"
        assert Room.get_field("active").parse_draft("on") is True
        assert Room.get_field("active").parse_draft(None) is False
    
    def test_is_empty(self):
        assert Room.get_field("name").is_empty("  ") is True
        assert Room.get_field("name").is_empty("x") is False
        assert Room.get_field("active").is_empty(False) is False


class TestToPayload:
    """Tests for draft -> payload conversion."""
    
    def test_integer(self):
        assert Room.get_field("seats").to_payload("20") == 20
    
    def test_integer_below_min_raises(self):
        with pytest.raises(FieldConversionError) as exc:
            Room.get_field("seats").to_payload("0")
        
        assert exc.value.field_name == "seats"
    
    def test_integer_unparsable_raises(self):
        with pytest.raises(FieldConversionError):
            Room.get_field("seats").to_payload("zwanzig")
    
    def test_decimal_accepts_comma(self):
        assert Room.get_field("rate").to_payload("12,50") == 12.5
    
    @pytest.mark.parametrize("value", ["abc", "NaN", "-1"])
    def test_decimal_invalid_raises(self, value):
        with pytest.raises(FieldConversionError):
            Room.get_field("rate").to_payload(value)
    
    def test_empty_optional_is_omitted(self):
        assert Room.get_field("rate").to_payload("") is None
    
    def test_checkbox_is_bool(self):
        assert Room.get_field("active").to_payload(False) is False
    
    def test_reference_uses_url_builder(self):
        field = Room.get_field("building")
        
        assert field.to_payload(BUILDING_ID, _url) == _url("buildings", BUILDING_ID)
    
    def test_reference_without_builder_raises(self):
        with pytest.raises(ValueError):
            Room.get_field("building").to_payload(BUILDING_ID)
    
    @pytest.mark.parametrize("value", ["../x", "abc", BUILDING_ID + "/..", "x" * 24])
    def test_reference_rejects_non_record_id(self, value):
        with pytest.raises(FieldConversionError) as exc:
            Room.get_field("building").to_payload(value, _url)
        
        assert exc.value.field_name == "building"


class TestLivingAppsRecord:
    """Tests for the declarative record base."""
    
    def test_from_api_record(self):
        room = Room.from_api_record({
            "record_id": "65f0c0ffee0000000000abcd",
            "createdat": "2024-01-01",
            "updatedat": "2024-01-02",
            "fields": {"name": "A1", "seats": 20, "rate": 12.5, "unknown": "x"},
        })
        
        assert room.record_id == "65f0c0ffee0000000000abcd"
        assert room.created_at == "2024-01-01"
        assert room.name == "A1"
        assert room.seats == 20
        assert room.rate == Decimal("12.5")
        assert room.building is None
        assert room.active is False
    
    def test_missing_fields_bag(self):
        room = Room.from_api_record({"record_id": "r"})
        
        assert room.name is None
    
    def test_equality_and_hash(self):
        a = Room(record_id="r1", name="A")
        b = Room(record_id="r1", name="A")
        
        assert a == b
        assert hash(a) == hash(b)
        assert a != Room(record_id="r1", name="B")
    
    def test_repr(self):
        assert repr(Room(record_id="r1", name="A")).startswith("Room(record_id='r1', name='A'")
    
    def test_app_key(self):
        assert Room.get_app_key() == "rooms"
