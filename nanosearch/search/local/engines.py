"""Search engine results pages understood by the local search."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote_plus

TITLE_SCRIPT = "document.title"
CONTENT_SCRIPT = "document.body.outerHTML"


@dataclass(frozen=True, slots=True)
class ResultsEngine:
    """Results page URL plus the script that harvests `{title, url}` pairs."""

    name: str
    url_template: str
    results_script: str

    def build_url(self, query: str) -> str:
        return self.url_template.format(query=quote_plus(query))

    def script(self, limit: int) -> str:
        return self.results_script.replace("__LIMIT__", str(int(limit)))


_GOOGLE_SCRIPT = """
(() => {
  const out = [];
  for (const a of document.querySelectorAll('#search a')) {
    const h3 = a.querySelector('h3');
    if (!h3 || !a.href) continue;
    out.push({ title: h3.textContent, url: a.href });
    if (out.length >= __LIMIT__) break;
  }
  return out;
})()
""".strip()

_BING_SCRIPT = """
(() => {
  const out = [];
  for (const a of document.querySelectorAll('#b_results li.b_algo h2 a')) {
    if (!a.href) continue;
    out.push({ title: a.textContent, url: a.href });
    if (out.length >= __LIMIT__) break;
  }
  return out;
})()
""".strip()

_DUCKDUCKGO_SCRIPT = """
(() => {
  const out = [];
  for (const a of document.querySelectorAll('a.result__a')) {
    let url = a.href;
    try {
      url = new URL(a.href).searchParams.get('uddg') || a.href;
    } catch (e) {}
    if (!url) continue;
    out.push({ title: a.textContent, url });
    if (out.length >= __LIMIT__) break;
  }
  return out;
})()
""".strip()

ENGINES: dict[str, ResultsEngine] = {
    "google": ResultsEngine(
        name="google",
        url_template="https://www.google.com/search?q={query}",
        results_script=_GOOGLE_SCRIPT,
    ),
    "bing": ResultsEngine(
        name="bing",
        url_template="https://www.bing.com/search?q={query}",
        results_script=_BING_SCRIPT,
    ),
    "duckduckgo": ResultsEngine(
        name="duckduckgo",
        url_template="https://html.duckduckgo.com/html/?q={query}",
        results_script=_DUCKDUCKGO_SCRIPT,
    ),
}


def get_engine(name: str) -> ResultsEngine:
    engine = ENGINES.get((name or "").lower())
    if engine is None:
        raise ValueError(f"unknown results engine: {name}")
    return engine
