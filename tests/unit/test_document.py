import pytest

from vc_print.exceptions import ConfigUnavailableError, RenderError
from vc_print.rendering.document import (
    DocumentComposer,
    FontProvider,
    partition_display_fields,
    row_properties_margin,
)
from vc_print.rendering.templates import TemplateRenderer, TemplateStore, display_value


def _fields(count: int) -> dict:
    return {f"Label {i}": f"value {i}" for i in range(count)}


@pytest.fixture
def composer() -> DocumentComposer:
    return DocumentComposer(TemplateRenderer(), TemplateStore())


@pytest.mark.parametrize("count", range(7))
def test_partition_preserves_order_and_covers_every_field(count):
    fields = _fields(count)

    header, body = partition_display_fields(fields)

    assert len(header) == min(count, 2)
    assert len(body) == max(count - 2, 0)
    assert list(header) + list(body) == list(fields)


@pytest.mark.parametrize(
    ("row_count", "expected"),
    [(0, -40), (1, 0), (2, 0), (3, 40), (4, 40), (5, 80), (6, 80)],
)
def test_row_properties_margin(row_count, expected):
    assert row_properties_margin(row_count) == expected


def test_build_variables_binds_every_template_name(composer):
    variables = composer.build_variables(
        {"Name": "Jane Doe", "DOB": "1990-04-01", "Policy": "PN-0001"},
        text_color="#7C4616",
        background_color="#FDFAF9",
        title_name="Health Insurance",
        logo_url="https://issuer.example/logo.png",
        base64_qr_code="iVBORw0KGgo=",
    )

    assert variables == {
        "logoUrl": "https://issuer.example/logo.png",
        "headerProperties": {"Name": "Jane Doe", "DOB": "1990-04-01"},
        "rowProperties": {"Policy": "PN-0001"},
        "keyFontColor": "#7C4616",
        "bgColor": "#FDFAF9",
        "rowPropertiesMargin": 0,
        "titleName": "Health Insurance",
        "base64QRCode": "iVBORw0KGgo=",
    }


def test_render_html_omits_qr_image_without_code(composer):
    variables = composer.build_variables(_fields(2), "#000", "#fff", "Card", "", "")

    html = composer.render_html(variables)

    assert "Label 0" in html
    assert "data:image/png;base64," not in html
    assert "<img" not in html
    assert "padding-top: 0px" in html


def test_render_html_escapes_credential_values(composer):
    variables = composer.build_variables({"Name": "<b>Jane</b>"}, "#000", "#fff", "Card", "", "")

    html = composer.render_html(variables)

    assert "&lt;b&gt;Jane&lt;/b&gt;" in html


def test_compose_pdf_document(composer):
    document = composer.compose(
        _fields(5),
        text_color="#7C4616",
        background_color="#FDFAF9",
        title_name="Health Insurance",
        logo_url="",
        base64_qr_code="",
    )

    assert document.startswith(b"%PDF")


def test_missing_template_is_config_fault(tmp_path):
    composer = DocumentComposer(TemplateRenderer(), TemplateStore(tmp_path), template_name="absent.html")

    with pytest.raises(ConfigUnavailableError):
        composer.compose({}, "#000", "#fff", "Card", "", "")


def test_broken_template_is_render_fault(tmp_path):
    (tmp_path / "broken.html").write_text("<p>{% for x in %}</p>", encoding="utf-8")
    composer = DocumentComposer(TemplateRenderer(), TemplateStore(tmp_path), template_name="broken.html")

    with pytest.raises(RenderError):
        composer.compose({}, "#000", "#fff", "Card", "", "")


def test_template_dir_overrides_packaged_templates(tmp_path):
    (tmp_path / "credential.html").write_text("<p>{{ titleName }}</p>", encoding="utf-8")

    assert TemplateStore(tmp_path).get("credential.html") == "<p>{{ titleName }}</p>"
    assert "headerProperties" in TemplateStore().get("credential.html")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ""),
        ("Jane", "Jane"),
        (42, "42"),
        ([], ""),
        ([{"language": "eng", "value": "Male"}, {"language": "fra", "value": "Homme"}], "Male"),
        ({"value": "Female"}, "Female"),
        ({"city": "Pune", "country": "IN"}, "Pune, IN"),
    ],
)
def test_display_value(value, expected):
    assert display_value(value) == expected


def test_font_provider_css_registers_faces():
    provider = FontProvider(family="Inter", faces={("bold", "normal"): "/fonts/Inter-Bold.ttf"})

    css = provider.css()

    assert "font-family: Inter" in css
    assert "src: url('/fonts/Inter-Bold.ttf')" in css
    assert "font-weight: bold" in css


def test_default_font_provider_uses_builtin_family():
    css = FontProvider().css()

    assert "@font-face" not in css
    assert "font-family: Helvetica" in css
