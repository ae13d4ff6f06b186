"""
Page fixtures for end-to-end loader scenarios.
"""

from activity_loader import LoaderConfig, ActivityLoader, SourceResolver
from activity_loader.frontend import Document, HIDDEN_CLASS, ITEM_CLASS


PAGE_MARKUP = """<!DOCTYPE html>
<html>
<body>
  <section id="activities">
    <div class="activity-container"></div>
    <div id="load-more-container" style="display: none"><button>Show more</button></div>
    <div id="collapse-container" style="display: none"><button>Collapse</button></div>
  </section>
</body>
</html>"""

PAGE_WITHOUT_CONTAINER = "<html><body><div class='news'></div></body></html>"

PAGE_WITHOUT_TOGGLES = "<html><body><div class='activity-container'></div></body></html>"


def make_page(markup=PAGE_MARKUP):
    return Document.from_markup(markup)


def make_loader(page, routes, sources, **config_overrides):
    config = LoaderConfig(sources=tuple(sources), **config_overrides)
    return ActivityLoader(page, SourceResolver(config.sources, routes.fetcher()), config)


def item_elements(page):
    return page.query_selector(".activity-container").find_all_by_class(ITEM_CLASS)


def visible_titles(page):
    return [
        item.query_selector("h4").text_content
        for item in item_elements(page)
        if not item.has_class(HIDDEN_CLASS)
    ]
