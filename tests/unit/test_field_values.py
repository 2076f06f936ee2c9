import pytest

from walkthrough.recon import field_values  # type: ignore[import]
from walkthrough.recon.field_values import (  # type: ignore[import]
    build_selector,
    canonical_field_type,
    generate_fields,
    value_for_field,
)


def _meta(**overrides):
    meta = {
        "selector": "#field",
        "type": "text",
        "name": "",
        "placeholder": "",
        "label": "",
        "required": False,
    }
    meta.update(overrides)
    return meta


def test_email_named_text_field_gets_email_value():
    assert value_for_field(_meta(name="email", type="text")) == field_values.SAMPLE_EMAIL


def test_password_type_gets_strong_password():
    assert value_for_field(_meta(type="password")) == field_values.STRONG_PASSWORD


def test_password_rule_wins_over_email_keyword():
    assert value_for_field(_meta(type="password", name="email_password")) == field_values.STRONG_PASSWORD


@pytest.mark.parametrize(
    ("overrides", "expected"),
    [
        ({"type": "email"}, field_values.SAMPLE_EMAIL),
        ({"placeholder": "Your Email"}, field_values.SAMPLE_EMAIL),
        ({"label": "Full Name"}, field_values.SAMPLE_NAME),
        ({"name": "phone"}, field_values.SAMPLE_PHONE),
        ({"placeholder": "Tel."}, field_values.SAMPLE_PHONE),
        ({"type": "number", "name": "qty"}, field_values.SAMPLE_NUMBER),
        ({"name": "age"}, field_values.SAMPLE_NUMBER),
        ({"name": "user_age"}, field_values.SAMPLE_NUMBER),
        ({"name": "field1", "label": "Age"}, field_values.SAMPLE_NUMBER),
        ({"placeholder": "Your age"}, field_values.SAMPLE_NUMBER),
        ({"label": "Organization"}, field_values.SAMPLE_COMPANY),
        ({"name": "street_address"}, field_values.SAMPLE_ADDRESS),
        ({"name": "city"}, field_values.SAMPLE_CITY),
        ({"label": "Country"}, field_values.SAMPLE_COUNTRY),
        ({"type": "textarea", "name": "message"}, field_values.SAMPLE_TEXT),
        ({"type": "text", "label": "Page title"}, field_values.SAMPLE_TEXT),
        ({"type": "text", "name": "q"}, field_values.SAMPLE_TEXT),
        ({"type": "checkbox", "name": "terms", "required": True}, field_values.SAMPLE_CHECKED),
    ],
)
def test_rule_table(overrides, expected):
    assert value_for_field(_meta(**overrides)) == expected


@pytest.mark.parametrize(
    "overrides",
    [
        {"type": "select", "name": "plan"},
        {"type": "checkbox", "name": "newsletter"},
        {"type": "date", "name": "start"},
    ],
)
def test_fields_without_a_rule_get_no_value(overrides):
    assert value_for_field(_meta(**overrides)) is None


def test_generate_fields_omits_fields_without_value():
    fields = generate_fields(
        [
            _meta(selector="#email", type="email"),
            _meta(selector="select:nth-of-type(1)", type="select"),
        ]
    )

    assert fields == [
        {"selector": "#email", "value": field_values.SAMPLE_EMAIL, "type": "email"}
    ]


def test_build_selector_prefers_id_then_name_then_position():
    assert build_selector(element_id="login", name="user", tag="input", position=3) == "#login"
    assert build_selector(element_id=None, name="user", tag="input", position=3) == 'input[name="user"]'
    assert build_selector(element_id=None, name=None, tag="textarea", position=2) == "textarea:nth-of-type(2)"


def test_build_selector_quotes_unusual_ids():
    assert build_selector(element_id="user.email", name=None, tag="input", position=1) == '[id="user.email"]'


@pytest.mark.parametrize(
    ("raw_type", "tag", "expected"),
    [
        ("select-one", "select", "select"),
        ("", "textarea", "textarea"),
        ("search", "input", "text"),
        ("", "input", "text"),
        ("email", "input", "email"),
        ("date", "input", "date"),
    ],
)
def test_canonical_field_type(raw_type, tag, expected):
    assert canonical_field_type(raw_type, tag) == expected
