import pytest

from conftest import posix_only, read_members
from officify import (
    ConverterExitError,
    ConverterNotFoundError,
    CorruptArchiveError,
    NotLoadedError,
    Officify,
    OfficifyOptions,
)
from officify.core.converter.resolver import SOFFICE_ENV_VAR


@pytest.fixture
def make_doc(config):
    def _make(data, options=None, env=None):
        return Officify(data, options, config=config, env={} if env is None else env)
    return _make


class TestLoading:

    def test_operations_before_load_raise_not_loaded(self, make_doc, odt_bytes):
        doc = make_doc(odt_bytes)
        assert not doc.is_loaded
        with pytest.raises(NotLoadedError):
            doc.replace_placeholders({"{{NAME}}": "World"})
        with pytest.raises(NotLoadedError):
            doc.replace_placeholders({})
        with pytest.raises(NotLoadedError):
            doc.replace_images({"a.png": b"x"})
        with pytest.raises(NotLoadedError):
            doc.get_buffer()
        with pytest.raises(NotLoadedError):
            doc.export_pdf()
        with pytest.raises(NotLoadedError):
            doc.member_names()

    def test_load_corrupt_bytes(self, make_doc):
        doc = make_doc(b"definitely not a zip")
        with pytest.raises(CorruptArchiveError):
            doc.load()
        assert not doc.is_loaded

    def test_member_names(self, make_doc, odt_bytes):
        doc = make_doc(odt_bytes)
        doc.load()
        assert doc.is_loaded
        assert "content.xml" in doc.member_names()


class TestTemplating:
    """Full load -> substitute -> replace images -> serialize pipeline."""

    def test_hello_world(self, make_doc, odt_bytes):
        doc = make_doc(odt_bytes)
        doc.load()
        doc.replace_placeholders({"{{NAME}}": "World"})
        members = read_members(doc.get_buffer())
        original = read_members(odt_bytes)
        assert b"Hello World" in members["content.xml"]
        assert {k: v for k, v in members.items() if k != "content.xml"} == \
            {k: v for k, v in original.items() if k != "content.xml"}

    def test_empty_map_no_op(self, make_doc, odt_bytes):
        doc = make_doc(odt_bytes)
        doc.load()
        doc.replace_placeholders({})
        assert read_members(doc.get_buffer()) == read_members(odt_bytes)

    def test_images_and_placeholders(self, make_doc, odt_bytes, png_bytes):
        doc = make_doc(odt_bytes)
        doc.load()
        doc.replace_placeholders({"{{NAME}}": '<draw:image xlink:href="Pictures/chart.png"/>'})
        doc.replace_images({"chart.png": png_bytes})
        members = read_members(doc.get_buffer())
        assert members["Pictures/chart.png"] == png_bytes
        assert b"Pictures/chart.png" in members["content.xml"]

    def test_buffer_reloads(self, make_doc, odt_bytes):
        doc = make_doc(odt_bytes)
        doc.load()
        again = make_doc(doc.get_buffer())
        again.load()
        assert again.member_names() == doc.member_names()


@posix_only
class TestConverterResolution:

    def test_option_beats_environment(self, make_doc, odt_bytes, fake_soffice, failing_soffice):
        doc = make_doc(odt_bytes, OfficifyOptions(soffice_path=str(fake_soffice)),
                       env={SOFFICE_ENV_VAR: str(failing_soffice)})
        assert doc.soffice_path == str(fake_soffice)

    def test_environment_used(self, make_doc, odt_bytes, fake_soffice):
        doc = make_doc(odt_bytes, env={SOFFICE_ENV_VAR: str(fake_soffice)})
        assert doc.soffice_path == str(fake_soffice)

    def test_config_path_used(self, config_dir, odt_bytes, fake_soffice, failing_soffice):
        from officify.config import ConfigManager

        (config_dir / "converter.yml").write_text(f"soffice_path: {fake_soffice}\n", encoding="utf-8")
        doc = Officify(odt_bytes, config=ConfigManager(config_dir),
                       env={SOFFICE_ENV_VAR: str(failing_soffice)})
        assert doc.soffice_path == str(fake_soffice)


@posix_only
class TestExportPdf:

    def test_export_uses_manifest_extension(self, make_doc, ods_bytes, fake_soffice, scratch_root):
        doc = make_doc(ods_bytes, OfficifyOptions(soffice_path=str(fake_soffice)))
        doc.load()
        pdf = doc.export_pdf()
        assert pdf.startswith(b"%PDF-1.4 fake input-")
        assert b".ods pdf" in pdf

    def test_export_uses_hint(self, make_doc, ods_bytes, fake_soffice, scratch_root):
        doc = make_doc(ods_bytes, OfficifyOptions(input_extension_hint="odp", soffice_path=str(fake_soffice)))
        doc.load()
        assert b".odp pdf" in doc.export_pdf()

    def test_export_page_range(self, make_doc, odt_bytes, fake_soffice, scratch_root):
        doc = make_doc(odt_bytes, OfficifyOptions(soffice_path=str(fake_soffice)))
        doc.load()
        assert b'{"PageRange":{"type":"string","value":"2-3"}}' in doc.export_pdf(pages="2-3")

    def test_export_failure(self, make_doc, odt_bytes, failing_soffice, scratch_root):
        doc = make_doc(odt_bytes, OfficifyOptions(soffice_path=str(failing_soffice)))
        doc.load()
        with pytest.raises(ConverterExitError) as excinfo:
            doc.export_pdf()
        assert excinfo.value.exit_code == 2
        assert list(scratch_root.iterdir()) == []


class TestStrictResolution:
    """A missing converter under strict resolution only fails the PDF export."""

    @pytest.fixture
    def strict_doc(self, config_dir, tmp_path, monkeypatch, odt_bytes):
        from officify.config import ConfigManager
        from officify.core.converter import resolver

        monkeypatch.setattr(resolver, "platform_candidates", lambda platform=None: [])
        (config_dir / "converter.yml").write_text("strict_resolution: true\n", encoding="utf-8")
        empty_path = tmp_path / "empty-bin"
        empty_path.mkdir()
        return Officify(odt_bytes, config=ConfigManager(config_dir), env={"PATH": str(empty_path)})

    def test_templating_still_works(self, strict_doc):
        strict_doc.load()
        strict_doc.replace_placeholders({"{{NAME}}": "World"})
        strict_doc.replace_images({"logo.png": b"new"})
        members = read_members(strict_doc.get_buffer())
        assert b"Hello World" in members["content.xml"]
        assert members["Pictures/logo.png"] == b"new"

    def test_export_raises_not_found(self, strict_doc, scratch_root):
        strict_doc.load()
        with pytest.raises(ConverterNotFoundError):
            strict_doc.export_pdf()
        assert list(scratch_root.iterdir()) == []

    def test_export_before_load_still_not_loaded(self, strict_doc):
        with pytest.raises(NotLoadedError):
            strict_doc.export_pdf()
