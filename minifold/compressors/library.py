from typing import Any, Dict

import csscompressor
import minify_html
import rcssmin
import rjsmin

from minifold.compressors.base import LibraryAdapter


# ============================================================================
# In-process Compressors
# ============================================================================


class RJSMinAdapter(LibraryAdapter):
    """JavaScript minification with rjsmin."""

    name = "rjsmin"
    allowed_options = frozenset({"keep_bang_comments"})

    def minify_text(self, text: str, options: Dict[str, Any]) -> str:
        return rjsmin.jsmin(text, **options)


class RCSSMinAdapter(LibraryAdapter):
    """CSS minification with rcssmin."""

    name = "rcssmin"
    allowed_options = frozenset({"keep_bang_comments"})

    def minify_text(self, text: str, options: Dict[str, Any]) -> str:
        return rcssmin.cssmin(text, **options)


class CSSCompressorAdapter(LibraryAdapter):
    """CSS minification with csscompressor (a port of the YUI CSS rules)."""

    name = "csscompressor"
    allowed_options = frozenset({"max_linelen", "preserve_exclamation_comments"})

    def minify_text(self, text: str, options: Dict[str, Any]) -> str:
        return csscompressor.compress(text, **options)


class MinifyHTMLAdapter(LibraryAdapter):
    """HTML minification with minify-html, including inline CSS and JS."""

    name = "minify-html"
    allowed_options = frozenset(
        {
            "keep_closing_tags",
            "keep_comments",
            "keep_html_and_head_opening_tags",
            "minify_css",
            "minify_doctype",
            "minify_js",
            "remove_bangs",
            "remove_processing_instructions",
        }
    )

    def minify_text(self, text: str, options: Dict[str, Any]) -> str:
        return minify_html.minify(text, **options)
