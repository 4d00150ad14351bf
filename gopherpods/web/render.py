"""HTML page rendering with jinja2."""

from typing import Any

from jinja2 import Environment, PackageLoader, select_autoescape


class PageRenderer:
    """Renders the site's pages from the templates shipped with the package."""

    def __init__(self, recaptcha_site_key: str = ""):
        self.recaptcha_site_key = recaptcha_site_key
        self._env = Environment(
            loader=PackageLoader("gopherpods.web", "templates"),
            autoescape=select_autoescape(["html"]),
        )

    def render(self, page: str, **context: Any) -> str:
        context.setdefault("recaptcha_site_key", self.recaptcha_site_key)
        return self._env.get_template(f"{page}.html").render(**context)
