#!/usr/bin/env python3
"""Profile markuptree parsing, querying and serialization."""

import cProfile
import io
import pstats

from markuptree import MarkupParser

row = "<tr><td class=\"cell\">Cell 1</td><td class=\"cell odd\">Cell 2</td></tr>\n"
html = f"""
<!DOCTYPE html>
<html>
<head><title>Test</title></head>
<body>
    <div class="container">
        <p>Paragraph 1</p>
        <!-- comments are stripped in HTML mode -->
        <p>Paragraph <b>2</b></p>
        <table>
            {row * 500}
        </table>
    </div>
</body>
</html>
"""

pr = cProfile.Profile()
pr.enable()

for _ in range(10):
    document = MarkupParser(html, html=True)
    cells = document.query_selector_all("table td.odd")
    _ = document.to_markup(pretty=True)

pr.disable()

s = io.StringIO()
ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
ps.print_stats(30)
print(s.getvalue())
print(f"{len(cells)} matching cells")
