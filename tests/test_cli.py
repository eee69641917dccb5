import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from io import StringIO
from pathlib import Path

from markuptree.__main__ import main


class TestCommandLine(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)

    def _write(self, text):
        path = Path(self._tmp.name) / "doc.html"
        path.write_text(text, encoding="utf-8")
        return str(path)

    def _run(self, *argv):
        out, err = StringIO(), StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            status = main(list(argv))
        return status, out.getvalue(), err.getvalue()

    def test_prints_serialized_document(self):
        status, out, _ = self._run(self._write("<a><b/></a>"))
        assert status == 0
        assert out == "<a><b></b></a>\n"

    def test_html_mode(self):
        status, out, _ = self._run(self._write("<!DOCTYPE html><p>Hi</p>"), "--html")
        assert status == 0
        assert out == "<!DOCTYPE html>\n<html><head></head><body><p>Hi</p></body></html>\n"

    def test_pretty_html_document_ends_with_one_newline(self):
        status, out, _ = self._run(self._write("<p>Hi</p>"), "--html", "--pretty")
        assert status == 0
        assert out.endswith("</body>\n</html>\n")

    def test_select(self):
        path = self._write('<ul><li class="x">1</li><li>2</li><li class="x">3</li></ul>')
        status, out, _ = self._run(path, "--select", "li.x")
        assert status == 0
        assert out.splitlines() == ['<li class="x">1</li>', '<li class="x">3</li>']

    def test_tree_listing(self):
        status, out, _ = self._run(self._write("<a>t</a>"), "--tree")
        assert status == 0
        assert out.splitlines()[:2] == ["a", " level: 1"]

    def test_trace_goes_to_stderr(self):
        status, _, err = self._run(self._write("<a/>"), "--trace")
        assert status == 0
        assert "found tag: a" in err

    def test_parse_error_exits_with_status_1(self):
        status, out, err = self._run(self._write("<a></b>"))
        assert status == 1
        assert out == ""
        assert "wrong tag end" in err

    def test_invalid_selector(self):
        status, _, err = self._run(self._write("<a/>"), "--select", " ")
        assert status == 1
        assert "invalid selector" in err
