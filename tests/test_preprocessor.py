"""
Tests for the host protocol, the preprocessor facade and the CLI.
"""
import copy
import io
import json
import subprocess
import sys

import pytest

from mdfront.common.book_io import (
    HOST_VERSION,
    apply_documents,
    check_version,
    collect_documents,
    read_payload,
    write_book,
)
from mdfront.common.errors import BatchFailedError, ConfigError, InvalidSchemaUrlError, ProtocolError
from mdfront.main import main
from mdfront.preprocessor import FrontmatterPreprocessor

FIXED_GETTING_STARTED = (
    "---\ntitle: Getting Started\nweight: 2\nstatus: draft\ntags: []\n---"
    "\n\n# Getting Started\n\n---\n\nA rule above, not frontmatter.\n"
)


@pytest.fixture
def sample_payload(fixtures_dir):
    """The sample [context, book] pair, pointing at the page schema."""
    with open(fixtures_dir / "book.sample.json", 'r') as f:
        context, book = json.load(f)
    table = context["config"]["preprocessor"]["frontmatter"]
    table["schema"] = f"file://{fixtures_dir / 'page.schema.json'}"
    return context, book


def _chapter(book, *indexes):
    item = book["sections"][indexes[0]]["Chapter"]
    for i in indexes[1:]:
        item = item["sub_items"][i]["Chapter"]
    return item


class TestBookIO:
    """Test reading and writing the host payload."""

    def test_read_payload(self, sample_payload):
        context, book = sample_payload
        stream = io.StringIO(json.dumps([context, book]))

        assert read_payload(stream) == (context, book)

    @pytest.mark.parametrize("text", ["not json", "{}", "[1, 2, 3]", "[[], {}]"])
    def test_read_payload_rejects(self, text):
        with pytest.raises(ProtocolError):
            read_payload(io.StringIO(text))

    def test_collect_documents_walks_sub_items(self, sample_payload):
        _, book = sample_payload

        pairs = collect_documents(book)

        assert [d.name for _, d in pairs] == ["Introduction", "Getting Started", "Plain"]
        assert pairs[1][1].path == "intro/getting-started.md"

    def test_collect_documents_items_key(self, sample_payload):
        """Newer hosts name the top-level list `items`."""
        _, book = sample_payload
        book["items"] = book.pop("sections")

        assert len(collect_documents(book)) == 3

    def test_apply_documents(self, sample_payload):
        _, book = sample_payload
        pairs = collect_documents(book)
        pairs[2][1].content = "changed"

        assert apply_documents(pairs) == 1
        assert _chapter(book, 3)["content"] == "changed"

    def test_write_book(self, sample_payload):
        _, book = sample_payload
        stream = io.StringIO()

        write_book(book, stream)

        assert json.loads(stream.getvalue()) == book

    def test_check_version(self, caplog):
        assert check_version({"mdbook_version": HOST_VERSION})
        assert not check_version({"mdbook_version": "0.3.0"})
        assert "version mismatch" in caplog.text


class TestFrontmatterPreprocessor:
    """Test the preprocessor facade."""

    def test_identify(self):
        assert FrontmatterPreprocessor().identify() == "frontmatter"

    def test_supports_renderer(self):
        preprocessor = FrontmatterPreprocessor()
        assert preprocessor.supports("html")
        assert preprocessor.supports("epub")
        assert not preprocessor.supports("not-supported")

    def test_run_fix_mode(self, sample_payload):
        context, book = sample_payload
        original = copy.deepcopy(book)

        processed = FrontmatterPreprocessor().run(context, book)

        assert _chapter(processed, 0)["content"] == _chapter(original, 0)["content"]
        assert _chapter(processed, 0, 0)["content"] == FIXED_GETTING_STARTED
        assert _chapter(processed, 3)["content"] == _chapter(original, 3)["content"]
        assert processed["sections"][1] == "Separator"

    def test_run_validate_mode_fails(self, sample_payload):
        context, book = sample_payload
        context["config"]["preprocessor"]["frontmatter"]["mode"] = "validate"

        with pytest.raises(BatchFailedError) as exc_info:
            FrontmatterPreprocessor().run(context, book)

        assert "Getting Started" in str(exc_info.value)

    def test_run_validate_mode_without_fail_on_error(self, sample_payload):
        context, book = sample_payload
        table = context["config"]["preprocessor"]["frontmatter"]
        table["mode"] = "validate"
        table["fail_on_error"] = False
        original = copy.deepcopy(book)

        assert FrontmatterPreprocessor().run(context, book) == original

    def test_injected_schema_loader(self, sample_payload, title_schema):
        context, book = sample_payload
        calls = []

        def loader(uri, timeout):
            calls.append((uri, timeout))
            return title_schema

        FrontmatterPreprocessor(schema_loader=loader).run(context, book)

        assert calls == [(context["config"]["preprocessor"]["frontmatter"]["schema"], 5.0)]

    def test_renderer_not_in_allow_list(self, sample_payload):
        context, book = sample_payload
        context["config"]["preprocessor"]["frontmatter"]["renderers"] = ["epub"]
        original = copy.deepcopy(book)

        def loader(uri, timeout):
            raise AssertionError("schema must not be loaded")

        assert FrontmatterPreprocessor(schema_loader=loader).run(context, book) == original

    def test_missing_config(self, sample_payload):
        context, book = sample_payload
        del context["config"]["preprocessor"]["frontmatter"]

        with pytest.raises(ConfigError):
            FrontmatterPreprocessor().run(context, book)

    def test_invalid_schema_url(self, sample_payload):
        context, book = sample_payload
        context["config"]["preprocessor"]["frontmatter"]["schema"] = "schema.json"

        with pytest.raises(InvalidSchemaUrlError):
            FrontmatterPreprocessor().run(context, book)


class TestCli:
    """Test the command line entry point."""

    def _run(self, repo_root, args, payload=None):
        return subprocess.run(
            [sys.executable, "-m", "mdfront.main", *args],
            input=json.dumps(payload) if payload is not None else "",
            capture_output=True,
            text=True,
            cwd=repo_root,
        )

    def test_supports(self):
        assert main(["supports", "html"]) == 0
        assert main(["supports", "not-supported"]) == 1

    def test_supports_exit_status(self, repo_root):
        assert self._run(repo_root, ["supports", "html"]).returncode == 0
        assert self._run(repo_root, ["supports", "not-supported"]).returncode == 1

    def test_preprocess_stdin_stdout(self, repo_root, sample_payload):
        context, book = sample_payload
        context["mdbook_version"] = "0.0.1"

        r = self._run(repo_root, [], [context, book])

        assert r.returncode == 0, f"Preprocessor failed: {r.stderr}"
        processed = json.loads(r.stdout)
        assert _chapter(processed, 0, 0)["content"] == FIXED_GETTING_STARTED
        assert "version mismatch" in r.stderr

    def test_preprocess_error(self, repo_root, sample_payload):
        context, book = sample_payload
        context["config"]["preprocessor"]["frontmatter"]["mode"] = "validate"

        r = self._run(repo_root, [], [context, book])

        assert r.returncode == 1
        assert r.stdout == ""
        assert "Error: Frontmatter validation errors:" in r.stderr
        assert "Getting Started" in r.stderr

    def test_bad_input(self, repo_root):
        r = self._run(repo_root, [])

        assert r.returncode == 1
        assert "Error:" in r.stderr
