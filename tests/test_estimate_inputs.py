"""Keyword classifiers and the estimate-data boundary model."""
import pytest

from marinecrm.services.estimate_inputs import (
    ActingMode,
    Actuation,
    EstimateInputs,
    ItemGroup,
    StarterKind,
    ValveModel,
    classify_acting_mode,
    classify_actuation,
    classify_line_item,
    classify_starter,
    classify_valve_model,
    match_pump_model,
)


class TestClassifiers:

    @pytest.mark.parametrize("text,expected", [
        ("VFD", StarterKind.VFD),
        ("Variable frequency drive", StarterKind.VFD),
        ("Soft starter", StarterKind.SOFT),
        ("Y/D", StarterKind.STAR_DELTA),
        ("Star-Delta", StarterKind.STAR_DELTA),
        ("DOL", StarterKind.DOL),
        ("DOL starter", StarterKind.DOL),
        (None, StarterKind.DOL),
        ("", StarterKind.DOL),
    ])
    def test_starter(self, text, expected):
        assert classify_starter(text) == expected

    @pytest.mark.parametrize("text,expected", [
        ("Double-flange DN200", ValveModel.DOUBLE_FLANGE),
        ("double flanged", ValveModel.DOUBLE_FLANGE),
        ("Semi-lug", ValveModel.SEMI_LUG),
        ("LUG type", ValveModel.LUG),
        ("wafer", ValveModel.WAFER),
        ("Mono flange", ValveModel.MONO),
        ("gate", ValveModel.GENERIC),
        (None, ValveModel.GENERIC),
    ])
    def test_valve_model(self, text, expected):
        assert classify_valve_model(text) == expected

    def test_acting_mode_defaults_to_single(self):
        assert classify_acting_mode(None) == ActingMode.SINGLE
        assert classify_acting_mode("spring return") == ActingMode.SINGLE

    def test_acting_mode_double(self):
        assert classify_acting_mode("Double-acting") == ActingMode.DOUBLE
        assert classify_acting_mode("DA") == ActingMode.DOUBLE

    def test_double_flange_is_not_double_acting(self):
        assert classify_acting_mode("Double-flange valve") == ActingMode.SINGLE

    def test_actuation(self):
        assert classify_actuation("electric actuator") == Actuation.ELECTRIC
        assert classify_actuation("pneumatic") == Actuation.PNEUMATIC
        assert classify_actuation(None) == Actuation.PNEUMATIC

    def test_pump_model_substring(self):
        assert match_pump_model("RBP 300 reversible") == "RBP-300"
        assert match_pump_model("rbp-250") == "RBP-250"
        assert match_pump_model("XYZ-1") is None
        assert match_pump_model(None) is None

    def test_line_item_groups(self):
        assert classify_line_item("Valves", None, None) == ItemGroup.VALVE
        assert classify_line_item(None, "Pump RBP-250", None) == ItemGroup.PUMP
        assert classify_line_item("Starter", None, None) == ItemGroup.STARTER
        assert classify_line_item(None, None, "Level switch") == ItemGroup.LEVEL_SWITCH
        assert classify_line_item(None, None, None) == ItemGroup.OTHER


class TestEstimateInputs:

    def test_empty_and_malformed_data_use_defaults(self):
        for data in ({}, None, "garbage", [1, 2]):
            inputs = EstimateInputs.from_data(data)
            assert inputs.pump_quantity is None
            assert inputs.enclosure == "IP55"
            assert inputs.support_personnel == 1
            assert inputs.extra_support_days == 0
            assert inputs.line_items == []

    def test_reads_aliases_and_nested_paths(self):
        inputs = EstimateInputs.from_data({
            "pump": {"model": "RBP-400", "quantity": "2"},
            "motorRating": "45 kW",
            "controlSystem": {"screenSize": "10", "interface": "Profibus"},
            "starterType": "Soft",
            "classSociety": "DNV",
            "extraSupportDays": 2,
        })
        assert inputs.pump_model == "RBP-400"
        assert inputs.pump_quantity == 2
        assert inputs.motor_rating == 45
        assert inputs.screen_size == "10"
        assert inputs.interface == "Profibus"
        assert inputs.mounting == "desk- or cabinet-wall"
        assert inputs.starter_type == "Soft"
        assert inputs.class_society == "DNV"
        assert inputs.extra_support_days == 2

    def test_unparseable_numbers_degrade(self):
        inputs = EstimateInputs.from_data({"pumpQuantity": "n/a", "capacity": {"x": 1}})
        assert inputs.pump_quantity is None
        assert inputs.capacity is None

    def test_valve_line_items(self):
        inputs = EstimateInputs.from_data({"lineItems": [
            {"category": "valve", "model": "Lug", "actuation": "electric", "actingMode": "double", "quantity": 3},
            {"model": "Wafer", "actingMode": "single", "qty": 1},
            {"category": "pump", "model": "RBP-250", "quantity": 2},
            "not a mapping",
        ]})
        valves = inputs.items_in(ItemGroup.VALVE)
        assert len(valves) == 2
        assert valves[0].actuation == Actuation.ELECTRIC
        assert valves[0].acting_mode == ActingMode.DOUBLE
        assert valves[0].valve_model == ValveModel.LUG
        assert valves[1].actuation == Actuation.PNEUMATIC
        assert inputs.quantity_in(ItemGroup.PUMP) == 2

    def test_valves_list_defaults_to_valve_group(self):
        inputs = EstimateInputs.from_data({"valves": [{"model": "Semi-lug", "quantity": 4}]})
        assert inputs.quantity_in(ItemGroup.VALVE) == 4

    def test_negative_quantity_clamped(self):
        inputs = EstimateInputs.from_data({"lineItems": [{"category": "valve", "quantity": -2}]})
        assert inputs.line_items[0].quantity == 0

    def test_line_item_without_quantity_is_unset(self):
        inputs = EstimateInputs.from_data({"lineItems": [{"category": "pump", "model": "RBP-300"}]})
        assert inputs.line_items[0].quantity is None
        assert inputs.quantity_in(ItemGroup.PUMP) is None
        assert inputs.quantity_in(ItemGroup.VALVE) is None

    def test_group_quantity_sums_only_stated_quantities(self):
        inputs = EstimateInputs.from_data({"lineItems": [
            {"category": "pump", "quantity": 2},
            {"category": "pump"},
        ]})
        assert inputs.quantity_in(ItemGroup.PUMP) == 2

    @pytest.mark.parametrize("text,expected", [
        ("1,200 m3/h", 1200),
        ("12,000.5", 12000.5),
        ("2,5 mwc", 2.5),
        ("1,2345", 1.2345),
        ("45 kW", 45),
    ])
    def test_decimal_and_thousands_commas(self, text, expected):
        assert EstimateInputs.from_data({"capacity": text}).capacity == pytest.approx(expected)
