"""Form and form-field extraction.

Labels are what a downstream generator shows as "required business inputs",
so label resolution follows a fixed order:

1. ``label[for=<id>]`` inside the form, then anywhere in the document;
2. an ancestor ``<label>`` wrapping the field (minus the field's own value);
3. an immediately preceding sibling ``<label>``;
4. the parent's preceding sibling ``<label>``;
5. ``aria-label``;
6. the text of the ``aria-labelledby`` target;
7. a Title Case label derived from the field's ``name``.
"""

import re
from typing import List, Optional, Set

from bs4 import BeautifulSoup
from bs4.element import NavigableString, Tag

from app.models.page import FormField, PageForm
from app.services.dom import attr, parent_tag, text_of

_INPUT_TYPES = {
    "text": "text",
    "email": "email",
    "tel": "tel",
    "phone": "tel",
    "number": "number",
    "checkbox": "checkbox",
    "radio": "radio",
    "file": "file",
    "date": "date",
    "datetime": "date",
    "datetime-local": "date",
    "time": "date",
    "password": "password",
    "hidden": "hidden",
    "url": "url",
    "search": "search",
}

_BUTTON_TYPES = {"submit", "button", "reset", "image"}


def clean_label_text(text: str) -> str:
    """Drop required-marker asterisks, collapse whitespace and a trailing colon."""
    text = re.sub(r"\*+", "", text)
    text = re.sub(r"\s+", " ", text).strip()
    return re.sub(r"[:：]$", "", text).strip()


def format_label_from_name(name: str) -> str:
    """Turn a field name such as ``firstName``, ``last_name`` or ``tags[]`` into Title Case."""
    if not name:
        return "Field"
    text = re.sub(r"([a-z])([A-Z])", r"\1 \2", name)
    text = re.sub(r"[_-]", " ", text)
    text = text.replace("[]", "")
    text = re.sub(r"\s+", " ", text).strip()
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" "))


def _is_label(node: Optional[Tag]) -> bool:
    return node is not None and node.name == "label"


def find_label(field: Tag, form: Tag, soup: BeautifulSoup) -> Optional[str]:
    """Resolve the human label of *field*, or ``None`` when nothing matches."""
    field_id = attr(field, "id")
    if field_id:
        label = form.find("label", attrs={"for": field_id}) or soup.find("label", attrs={"for": field_id})
        if label is not None and text_of(label):
            return clean_label_text(label.get_text(" "))

    wrapping = field.find_parent("label")
    if wrapping is not None and text_of(wrapping):
        label_text = wrapping.get_text(" ")
        value = attr(field, "value")
        if value:
            label_text = label_text.replace(value, "", 1)
        return clean_label_text(label_text)

    previous = field.find_previous_sibling()
    if _is_label(previous):
        return clean_label_text(previous.get_text(" "))

    parent = parent_tag(field)
    if parent is not None:
        parent_previous = parent.find_previous_sibling()
        if _is_label(parent_previous):
            return clean_label_text(parent_previous.get_text(" "))

    aria_label = attr(field, "aria-label")
    if aria_label:
        return clean_label_text(aria_label)

    labelled_by = attr(field, "aria-labelledby")
    if labelled_by:
        target = soup.find(id=labelled_by)
        if target is not None and text_of(target):
            return clean_label_text(target.get_text(" "))

    return None


def _group_options(name: str, form: Tag) -> List[str]:
    """Collect option texts for a radio or checkbox group sharing *name*."""
    options: List[str] = []
    for option in form.find_all("input", attrs={"name": name}):
        text = ""
        wrapping = option.find_parent("label")
        if wrapping is not None:
            text = text_of(wrapping)
        else:
            following = option.next_sibling
            if isinstance(following, NavigableString):
                text = following.strip()
        if not text:
            text = attr(option, "value")
        if text and text not in options:
            options.append(text)
    return options


def _input_field(field: Tag, form: Tag, soup: BeautifulSoup) -> Optional[FormField]:
    input_type = attr(field, "type").lower() or "text"
    if input_type in _BUTTON_TYPES:
        return None
    name = attr(field, "name") or attr(field, "id")
    options = _group_options(name, form) if input_type in ("radio", "checkbox") and name else None
    return FormField(
        type=_INPUT_TYPES.get(input_type, "other"),
        name=name,
        label=find_label(field, form, soup) or format_label_from_name(name),
        placeholder=attr(field, "placeholder") or None,
        required=field.has_attr("required"),
        options=options or None,
        default_value=attr(field, "value") or None,
    )


def _textarea_field(field: Tag, form: Tag, soup: BeautifulSoup) -> FormField:
    name = attr(field, "name") or attr(field, "id")
    return FormField(
        type="textarea",
        name=name,
        label=find_label(field, form, soup) or format_label_from_name(name),
        placeholder=attr(field, "placeholder") or None,
        required=field.has_attr("required"),
        default_value=text_of(field) or None,
    )


def _select_field(field: Tag, form: Tag, soup: BeautifulSoup) -> FormField:
    name = attr(field, "name") or attr(field, "id")
    options: List[str] = []
    for option in field.find_all("option"):
        text = text_of(option)
        # "Select a service..." placeholders carry an empty value
        if option.get("value") == "" and "select" in text.lower():
            continue
        if text:
            options.append(text)
    return FormField(
        type="select",
        name=name,
        label=find_label(field, form, soup) or format_label_from_name(name),
        required=field.has_attr("required"),
        options=options or None,
    )


def extract_form_fields(form: Tag, soup: BeautifulSoup) -> List[FormField]:
    """Return the fields of *form*; groups sharing a ``name`` appear once."""
    fields: List[FormField] = []
    seen: Set[str] = set()

    candidates = (
        [_input_field(f, form, soup) for f in form.find_all("input")]
        + [_textarea_field(f, form, soup) for f in form.find_all("textarea")]
        + [_select_field(f, form, soup) for f in form.find_all("select")]
    )
    for field in candidates:
        if field is None or field.name in seen:
            continue
        seen.add(field.name)
        fields.append(field)
    return fields


def _submit_text(button: Optional[Tag]) -> Optional[str]:
    if button is None:
        return None
    return attr(button, "value").strip() or text_of(button) or attr(button, "aria-label").strip() or None


def detect_form_type(fields: List[FormField], form: Optional[Tag] = None) -> str:
    """Infer a form's purpose from its field composition, in priority order."""
    names = [f.name.lower() for f in fields]
    types = [f.type for f in fields]

    def named(*needles: str) -> bool:
        return any(needle in n for n in names for needle in needles)

    has_email = "email" in types or named("email")
    has_password = "password" in types or named("password")
    has_phone = "tel" in types or named("phone", "tel")
    has_message = "textarea" in types or named("message", "comment")
    has_name = named("name")
    has_search = "search" in types or named("search", "query")

    action = attr(form, "action").lower()
    form_class = attr(form, "class").lower()
    form_id = attr(form, "id").lower()

    if has_password and (has_email or named("username")) and len(fields) <= 4:
        return "login"
    if has_password and len(fields) > 3:
        return "signup"
    if has_search or "search" in action or "search" in form_class or "search" in form_id:
        return "search"
    if has_email and not has_message and not has_phone and len(fields) <= 2:
        return "newsletter"
    if named("date", "time", "booking", "appointment"):
        return "booking"
    if named("quote", "estimate", "budget", "project"):
        return "quote"
    if (has_name or has_email) and has_message:
        return "contact"
    if has_email or has_phone or has_message:
        return "contact"
    return "other"


def extract_forms(soup: BeautifulSoup) -> List[PageForm]:
    """Extract every form with at least one visible field."""
    forms: List[PageForm] = []
    for form in soup.find_all("form"):
        fields = extract_form_fields(form, soup)
        if not any(f.type != "hidden" for f in fields):
            continue

        submit = form.select_one('button[type="submit"], input[type="submit"], button:not([type])')
        method = attr(form, "method").upper()
        forms.append(
            PageForm(
                id=attr(form, "id") or None,
                action=attr(form, "action") or None,
                method=method if method in ("GET", "POST") else "POST",
                form_type=detect_form_type(fields, form),
                fields=fields,
                submit_text=_submit_text(submit) or "Submit",
            )
        )
    return forms
