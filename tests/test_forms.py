"""Tests for form extraction and form-type detection (app.services.forms)."""

import pytest

from app.services.dom import parse_html
from app.services.forms import clean_label_text, extract_forms, format_label_from_name

_CONTACT_FORM = """
<html><body>
<form id="contact-form" action="/send" method="post">
  <label for="full-name">Full name *</label>
  <input type="text" id="full-name" name="full_name" required>
  <label>Email: <input type="email" name="email"></label>
  <div><label>Phone</label><input type="tel" name="phone"></div>
  <label>Message</label>
  <div><textarea name="message" placeholder="How can we help?"></textarea></div>
  <input type="text" name="companyName" aria-label="Company">
  <input type="text" name="referral_source[]">
  <select name="service">
    <option value="">Select a service</option>
    <option>Repair</option>
    <option>Install</option>
  </select>
  <input type="hidden" name="token" value="abc">
  <button type="submit">Send message</button>
</form>
</body></html>
"""


def _form(html):
    forms = extract_forms(parse_html(html))
    assert len(forms) == 1
    return forms[0]


def _fields_html(*inputs, attrs=""):
    return f"<html><body><form {attrs}>{''.join(inputs)}</form></body></html>"


@pytest.fixture(scope="module")
def contact():
    return _form(_CONTACT_FORM)


class TestContactForm:
    def test_form_attributes(self, contact):
        assert contact.id == "contact-form"
        assert contact.action == "/send"
        assert contact.method == "POST"
        assert contact.submit_text == "Send message"
        assert contact.form_type == "contact"

    def test_field_order_inputs_then_textareas_then_selects(self, contact):
        assert [f.name for f in contact.fields] == [
            "full_name",
            "email",
            "phone",
            "companyName",
            "referral_source[]",
            "token",
            "message",
            "service",
        ]

    def test_label_for_attribute(self, contact):
        field = contact.fields[0]
        assert field.label == "Full name"
        assert field.required is True

    def test_label_wrapping_field(self, contact):
        assert contact.fields[1].label == "Email"
        assert contact.fields[1].type == "email"

    def test_label_previous_sibling(self, contact):
        assert contact.fields[2].label == "Phone"
        assert contact.fields[2].type == "tel"

    def test_label_parents_previous_sibling(self, contact):
        message = contact.fields[6]
        assert message.type == "textarea"
        assert message.label == "Message"
        assert message.placeholder == "How can we help?"

    def test_aria_label(self, contact):
        assert contact.fields[3].label == "Company"

    def test_label_from_name(self, contact):
        assert contact.fields[4].label == "Referral Source"
        assert contact.fields[5].label == "Token"
        assert contact.fields[5].type == "hidden"

    def test_select_options_skip_placeholder(self, contact):
        service = contact.fields[7]
        assert service.type == "select"
        assert service.options == ["Repair", "Install"]


class TestFieldDetails:
    def test_aria_labelledby(self):
        form = _form(
            '<html><body><span id="zip-label">Postal code</span>'
            '<form><input type="text" name="zip" aria-labelledby="zip-label"></form></body></html>'
        )
        assert form.fields[0].label == "Postal code"

    def test_radio_group_appears_once_with_options(self):
        form = _form(
            _fields_html(
                '<label><input type="radio" name="contact_pref" value="email"> Email me</label>',
                '<label><input type="radio" name="contact_pref" value="phone"> Call me</label>',
                '<input type="checkbox" name="extras" value="newsletter">Newsletter\n',
                '<input type="checkbox" name="extras" value="offers">\n',
            )
        )
        assert [f.name for f in form.fields] == ["contact_pref", "extras"]
        assert form.fields[0].options == ["Email me", "Call me"]
        assert form.fields[1].options == ["Newsletter", "offers"]
        assert form.form_type == "other"

    def test_buttons_are_not_fields(self):
        form = _form(_fields_html('<input type="email" name="email">', '<input type="submit" value="Join">'))
        assert [f.name for f in form.fields] == ["email"]
        assert form.submit_text == "Join"

    def test_default_submit_text(self):
        form = _form(_fields_html('<input type="text" name="q">', attrs='action="/search"'))
        assert form.submit_text == "Submit"

    def test_hidden_only_forms_are_skipped(self):
        html = _fields_html('<input type="hidden" name="csrf" value="x">')
        assert extract_forms(parse_html(html)) == []

    def test_get_method(self):
        form = _form(_fields_html('<input type="search" name="s">', attrs='method="get"'))
        assert form.method == "GET"


class TestFormType:
    @pytest.mark.parametrize(
        "inputs, attrs, expected",
        [
            (
                ['<input type="email" name="email">', '<input type="password" name="password">'],
                'class="login"',
                "login",
            ),
            (
                [
                    '<input name="name">',
                    '<input type="email" name="email">',
                    '<input type="tel" name="phone">',
                    '<input type="password" name="password">',
                    '<input type="password" name="confirm_password">',
                ],
                "",
                "signup",
            ),
            (['<input type="text" name="q">'], 'action="/search"', "search"),
            (['<input type="email" name="email">'], "", "newsletter"),
            (
                [
                    '<input name="name">',
                    '<input type="email" name="email">',
                    '<input type="date" name="appointment_date">',
                ],
                "",
                "booking",
            ),
            (
                ['<input name="name">', '<input type="email" name="email">', '<input name="budget">'],
                "",
                "quote",
            ),
            (['<input name="name">', '<textarea name="comments"></textarea>'], "", "contact"),
            (['<input type="tel" name="phone">', '<input name="city">', '<input name="zip">'], "", "contact"),
        ],
    )
    def test_priority_order(self, inputs, attrs, expected):
        assert _form(_fields_html(*inputs, attrs=attrs)).form_type == expected


class TestLabelHelpers:
    def test_clean_label_text(self):
        assert clean_label_text("  Your   email *: ") == "Your email"

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("firstName", "First Name"),
            ("last_name", "Last Name"),
            ("tags[]", "Tags"),
            ("", "Field"),
        ],
    )
    def test_format_label_from_name(self, name, expected):
        assert format_label_from_name(name) == expected
