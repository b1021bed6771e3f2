"""
Tests for string converters.

Tests cover:
- Literal parsing and failures
- Boolean words
- Calendar values through the configured parser and the registry context
- Instance references
- Bracketed collections
- Function entries refusing to reset
- Converter resolution from type tags
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from pathlib import Path

import pytest

from objectregister import (
    BoolConverter,
    CalendarConverter,
    ConversionError,
    ConverterTable,
    Function,
    FunctionConverter,
    InstanceConverter,
    KeyNotFoundError,
    List,
    ListConverter,
    LiteralConverter,
    ObjectRegistry,
    RegistryConfig,
    ResetUnsupportedError,
)
from objectregister.converters import type_tag_of

from sample_objects import Channel, Simulation, Storage


@pytest.fixture
def table():
    return ConverterTable(RegistryConfig())


class TestLiteralConverter:

    def test_float(self, registry):
        assert LiteralConverter(float).from_string("123.4", registry) == 123.4

    def test_int(self, registry):
        assert LiteralConverter(int).from_string("42", registry) == 42

    def test_str_is_identity(self, registry):
        assert LiteralConverter(str).from_string("spill way", registry) == "spill way"

    def test_other_constructible_types(self, registry):
        assert LiteralConverter(Decimal).from_string("1.10", registry) == Decimal("1.10")
        assert LiteralConverter(Path).from_string("data/in.csv", registry) == Path("data/in.csv")

    def test_malformed_number(self, registry):
        with pytest.raises(ConversionError) as exc_info:
            LiteralConverter(float).from_string("notanumber", registry)
        assert exc_info.value.text == "notanumber"
        assert exc_info.value.value_type is float

    def test_int_rejects_float_text(self, registry):
        with pytest.raises(ValueError):
            LiteralConverter(int).from_string("1.5", registry)

    def test_decimal_failure_is_conversion_error(self, registry):
        with pytest.raises(ConversionError):
            LiteralConverter(Decimal).from_string("abc", registry)

    def test_round_trip(self, registry):
        converter = LiteralConverter(float)
        assert converter.from_string(converter.to_string(0.1), registry) == 0.1


class TestBoolConverter:

    @pytest.mark.parametrize("text", ["true", "TRUE", "Yes", "y", " y "])
    def test_true_words(self, registry, text):
        assert BoolConverter().from_string(text, registry) is True

    @pytest.mark.parametrize("text", ["false", "No", "N"])
    def test_false_words(self, registry, text):
        assert BoolConverter().from_string(text, registry) is False

    @pytest.mark.parametrize("text", ["1", "0", "maybe", "", "yess"])
    def test_other_words_fail(self, registry, text):
        with pytest.raises(ConversionError):
            BoolConverter().from_string(text, registry)

    def test_to_string(self):
        assert BoolConverter().to_string(True) == "true"
        assert BoolConverter().to_string(False) == "false"


class TestCalendarConverter:

    def test_default_parser_is_iso(self, table, registry):
        converter = table.resolve(datetime)
        assert converter.from_string("2005-01-01T06:30:00", registry) == datetime(2005, 1, 1, 6, 30)

    def test_date(self, table, registry):
        assert table.resolve(date).from_string("2005-01-01", registry) == date(2005, 1, 1)

    def test_parser_receives_context(self):
        """Hour offsets resolved against the simulation epoch."""
        def hours_since_epoch(text, simulation):
            return simulation.epoch + timedelta(hours=int(text))

        config = RegistryConfig(calendar_parser=hours_since_epoch)
        registry = ObjectRegistry(context=Simulation(epoch=datetime(2010, 6, 1)), config=config)
        converter = registry.converter_for(datetime)
        assert converter.from_string("6", registry) == datetime(2010, 6, 1, 6)

    def test_bad_timestamp(self, table, registry):
        with pytest.raises(ConversionError):
            table.resolve(datetime).from_string("yesterday", registry)

    def test_to_string(self):
        converter = CalendarConverter(datetime, None)
        assert converter.to_string(datetime(2005, 1, 1)) == "2005-01-01T00:00:00"


class TestInstanceConverter:

    def test_resolves_instance_by_name(self, registry):
        lake = Storage("Lake")
        registry.set_instance(lake)
        assert InstanceConverter(Storage).from_string(" Lake ", registry) is lake

    def test_unknown_instance(self, registry):
        registry.set_instance(Storage("Lake"))
        with pytest.raises(KeyNotFoundError):
            InstanceConverter(Storage).from_string("Ocean", registry)

    def test_to_string_is_instance_name(self):
        converter = InstanceConverter(Channel)
        assert converter.to_string(Channel("spillway")) == "spillway"
        assert converter.to_string(None) == ""


class TestListConverter:

    def test_numbers(self, table, registry):
        result = table.resolve(List[int]).from_string("[1, 2, 3]", registry)
        assert result == [1, 2, 3]
        assert isinstance(result, List[int])

    def test_empty(self, table, registry):
        assert table.resolve(List[int]).from_string("[]", registry) == []
        assert table.resolve(List[int]).from_string(" [ ] ", registry) == []

    def test_empty_tokens_dropped(self, table, registry):
        assert table.resolve(List[str]).from_string("[a,, b,]", registry) == ["a", "b"]

    def test_instances_in_order(self, table, registry):
        mersey, forth = Channel("mersey"), Channel("forth")
        registry.set_instance(mersey)
        registry.set_instance(forth)
        result = table.resolve(List[Channel]).from_string("[forth, mersey]", registry)
        assert result[0] is forth
        assert result[1] is mersey

    def test_missing_brackets(self, table, registry):
        with pytest.raises(ConversionError):
            table.resolve(List[int]).from_string("1, 2", registry)

    def test_unclosed(self, table, registry):
        with pytest.raises(ConversionError):
            table.resolve(List[int]).from_string("[1, 2", registry)

    @pytest.mark.parametrize("text", ["[a, [b]", "[a], b]", "[[a, b]]"])
    def test_stray_brackets(self, table, registry, text):
        """Brackets inside the body are rejected rather than kept in elements."""
        with pytest.raises(ConversionError):
            table.resolve(List[str]).from_string(text, registry)

    def test_bad_element(self, table, registry):
        with pytest.raises(ConversionError):
            table.resolve(List[float]).from_string("[1.0, x]", registry)

    def test_configured_separators(self, registry):
        table = ConverterTable(RegistryConfig(list_separators=", "))
        assert table.resolve(List[str]).from_string("[a b,c]", registry) == ["a", "b", "c"]

    def test_to_string(self, table):
        converter = table.resolve(List[float])
        assert converter.to_string(List[float]([1.5, 2.0])) == "[1.5, 2.0]"
        assert converter.to_string([]) == "[]"

    def test_round_trip_by_identity(self, table, registry):
        lake, spillway = Storage("Lake"), Storage("Spillway")
        registry.set_instance(lake)
        registry.set_instance(spillway)
        converter = table.resolve(List[Storage])
        text = converter.to_string([lake, spillway])
        assert text == "[Lake, Spillway]"
        result = converter.from_string(text, registry)
        assert result[0] is lake and result[1] is spillway


class TestFunctionConverter:

    def test_reset_unsupported(self, registry):
        with pytest.raises(ResetUnsupportedError):
            FunctionConverter().from_string("anything", registry)

    def test_to_string(self):
        def volume():
            return 1.0
        assert FunctionConverter().to_string(volume).endswith("volume")


class TestResolution:

    def test_kinds(self, table):
        assert isinstance(table.resolve(bool), BoolConverter)
        assert isinstance(table.resolve(float), LiteralConverter)
        assert isinstance(table.resolve(datetime), CalendarConverter)
        assert isinstance(table.resolve(Storage), InstanceConverter)
        assert isinstance(table.resolve(List[Storage]), ListConverter)
        assert isinstance(table.resolve(Function), FunctionConverter)

    def test_cached(self, table):
        assert table.resolve(float) is table.resolve(float)

    def test_list_element_converter(self, table):
        assert table.resolve(List[bool]).element_converter is table.resolve(bool)

    def test_plain_list_rejected(self, table):
        with pytest.raises(TypeError):
            table.resolve(list)

    def test_override(self, table, registry):
        class Upper(LiteralConverter):
            def from_string(self, text, registry):
                return text.upper()

        table.register(str, Upper(str))
        assert table.resolve(str).from_string("abc", registry) == "ABC"


class TestTypeTagOf:

    def test_plain_values(self):
        assert type_tag_of(1.0) is float
        assert type_tag_of("x") is str
        assert type_tag_of(True) is bool

    def test_reified_list(self):
        assert type_tag_of(List[int]([1])) is List[int]

    def test_callables_share_function_tag(self):
        assert type_tag_of(lambda: 1) is Function
        assert type_tag_of(print) is Function
        assert type_tag_of(Storage("Lake").members) is Function

    def test_none_rejected(self):
        with pytest.raises(TypeError):
            type_tag_of(None)
