from __future__ import annotations

import pytest

from eview_gateway.catalog import (
    Category,
    CommandParam,
    CommandSpec,
    ParamKind,
    default_params,
    get_command,
    list_commands,
)
from eview_gateway.encoder import SMS_BYTE_LIMIT, check_limit, encode, ensure_valid, validate
from eview_gateway.errors import InvalidBoolean, InvalidNumber, InvalidOption, MissingParameter


def _beep() -> CommandSpec:
    return CommandSpec(
        id="beep",
        name="Beep",
        category=Category.control,
        structure="beep(on)",
        params=(CommandParam(name="on", label="On", kind=ParamKind.boolean),),
        encode=lambda p: f"beep{p['on']}",
    )


@pytest.mark.parametrize("cmd", list_commands(), ids=lambda c: c.id)
def test_defaults_encode_to_stable_nonempty_message(cmd) -> None:
    params = default_params(cmd)
    assert validate(cmd, params) == []
    first = encode(cmd, params)
    assert first
    assert encode(cmd, dict(params)) == first


@pytest.mark.parametrize(
    "command_id, params, expected",
    [
        ("loc", {}, "loc"),
        ("set_contacts", {"n": 1, "sms": 1, "call": 0, "phone": "639171234567"}, "A1,1,0,639171234567"),
        ("no_motion", {"on": 1, "time": 60, "call": 1}, "NMO1,60M,1"),
        ("timezone", {"zone": "+8", "min": "00"}, "tz+8:00"),
        ("fall_down", {"on": 0, "sensitivity": 9, "call": 1}, "fl0,9,1"),
        ("working_mode", {"mode": 3}, "mode3"),
        ("sos_button", {"mode": 2, "time": 20}, "SOS2,20"),
        ("sos_loops", {"time": 0}, "Loop0"),
        ("whitelist", {"n": 1}, "sms1"),
        ("apn", {"apn": "internet"}, "S1,internet"),
        ("server", {"ip": "1.2.3.4", "port": 6060}, "IP1,1.2.3.4,6060"),
        ("status", {}, "status"),
        ("reboot", {}, "reboot"),
        ("findme", {}, "findme"),
        ("mic_volume", {"level": 15}, "Micvolume15"),
        ("speaker_volume", {"level": 90}, "speakervolume90"),
    ],
)
def test_encode_templates(command_id, params, expected) -> None:
    assert encode(get_command(command_id), params) == expected


def test_encode_keeps_user_supplied_leading_zeros() -> None:
    assert encode(get_command("no_motion"), {"on": "1", "time": "060", "call": "1"}) == "NMO1,060M,1"


def test_encode_renders_integral_floats_without_fraction() -> None:
    assert encode(get_command("sos_loops"), {"time": 5.0}) == "Loop5"
    assert encode(get_command("sos_button"), {"mode": 1, "time": 2.5}) == "SOS1,2.5"


def test_suffix_is_not_appended() -> None:
    # sos_button declares suffix "x0.1s"
    assert encode(get_command("sos_button"), {"mode": 1, "time": 20}) == "SOS1,20"


def test_encode_ignores_undeclared_params() -> None:
    assert encode(get_command("loc"), {"extra": "x"}) == "loc"


def test_encode_missing_parameter_names_it() -> None:
    with pytest.raises(MissingParameter) as exc:
        encode(get_command("set_contacts"), {"n": 1, "sms": 1, "call": 1})
    assert exc.value.name == "phone"
    assert exc.value.field == "params.phone"


def test_encode_none_counts_as_missing() -> None:
    with pytest.raises(MissingParameter):
        encode(get_command("apn"), {"apn": None})


def test_empty_text_is_accepted() -> None:
    cmd = get_command("apn")
    assert validate(cmd, {"apn": ""}) == []
    assert encode(cmd, {"apn": ""}) == "S1,"


def test_validate_rejects_unknown_option_for_every_select() -> None:
    checked = 0
    for cmd in list_commands():
        for p in cmd.params:
            if p.kind is not ParamKind.select:
                continue
            params = default_params(cmd)
            params[p.name] = "not-an-option"
            errors = validate(cmd, params)
            assert len(errors) == 1, (cmd.id, p.name)
            assert isinstance(errors[0], InvalidOption)
            assert errors[0].field == f"params.{p.name}"
            checked += 1
    assert checked == 10


def test_validate_accepts_select_value_given_as_text() -> None:
    assert validate(get_command("working_mode"), {"mode": "6"}) == []
    assert validate(get_command("working_mode"), {"mode": 7})[0].code == "InvalidOption"


def test_validate_select_text_options_are_exact() -> None:
    assert validate(get_command("timezone"), {"zone": "+8", "min": "30"}) == []
    assert isinstance(validate(get_command("timezone"), {"zone": "+8", "min": "0"})[0], InvalidOption)


@pytest.mark.parametrize("value", ["abc", "", "inf", float("nan"), True, [1]])
def test_validate_rejects_non_numbers(value) -> None:
    errors = validate(get_command("mic_volume"), {"level": value})
    assert [type(e) for e in errors] == [InvalidNumber]


def test_documented_ranges_are_not_enforced() -> None:
    assert validate(get_command("fall_down"), {"on": 1, "sensitivity": 42, "call": 1}) == []
    assert validate(get_command("speaker_volume"), {"level": "-3"}) == []


def test_validate_reports_each_violation() -> None:
    errors = validate(get_command("fall_down"), {"on": 5, "sensitivity": "x"})
    assert [e.code for e in errors] == ["InvalidOption", "InvalidNumber", "MissingParameter"]


def test_ensure_valid_raises_first_violation() -> None:
    with pytest.raises(InvalidOption):
        ensure_valid(get_command("whitelist"), {"n": 2})
    ensure_valid(get_command("whitelist"), {"n": 0})


def test_boolean_kind_is_supported() -> None:
    cmd = _beep()
    assert encode(cmd, default_params(cmd)) == "beep0"
    assert encode(cmd, {"on": True}) == "beep1"
    assert encode(cmd, {"on": "true"}) == "beep1"
    assert validate(cmd, {"on": "off"}) == []
    assert isinstance(validate(cmd, {"on": "maybe"})[0], InvalidBoolean)


def test_check_limit_boundary() -> None:
    assert SMS_BYTE_LIMIT == 150
    at = check_limit("x" * 150)
    assert at.byte_length == 150 and at.within_limit
    over = check_limit("x" * 151)
    assert over.byte_length == 151 and not over.within_limit


def test_check_limit_counts_utf8_bytes() -> None:
    res = check_limit("é" * 75)
    assert res.byte_length == 150
    assert res.within_limit
    assert not check_limit("€" * 51).within_limit


def test_check_limit_override() -> None:
    res = check_limit("loc", limit=2)
    assert res.limit == 2
    assert not res.within_limit


def test_huge_integers_are_finite_numbers() -> None:
    level = int("1" + "0" * 400)
    cmd = get_command("mic_volume")
    assert validate(cmd, {"level": level}) == []
    assert encode(cmd, {"level": level}) == "Micvolume1" + "0" * 400


@pytest.mark.parametrize("value", ["6_0", "  6_0", "1e3", "0x10", "1.", ".5", "+", "٣"])
def test_validate_rejects_non_decimal_number_text(value) -> None:
    errors = validate(get_command("no_motion"), {"on": 1, "time": value, "call": 1})
    assert [type(e) for e in errors] == [InvalidNumber]


@pytest.mark.parametrize("value, expected", [("060", "NMO1,060M,1"), (" 45 ", "NMO1,45M,1"), ("2.5", "NMO1,2.5M,1")])
def test_decimal_number_text_is_encoded_as_typed(value, expected) -> None:
    cmd = get_command("no_motion")
    params = {"on": 1, "time": value, "call": 1}
    assert validate(cmd, params) == []
    assert encode(cmd, params) == expected
