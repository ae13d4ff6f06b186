"""
Page Model

Minimal element tree standing in for the page region the loader renders into.

RENDERING RULES:
================
1. Text nodes are always escaped on serialization - data never becomes markup
2. Visibility is expressed the way the page stylesheet expects it:
   a `hidden-activity` class on items, inline `display` on toggles
3. Appending an element that already has a parent moves it
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union
from html.parser import HTMLParser
import html


VOID_ELEMENTS = frozenset({
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input',
    'link', 'meta', 'source', 'track', 'wbr',
})
RAW_TEXT_ELEMENTS = frozenset({'script', 'style'})

ROOT_TAG = '#root'


class RawText(str):
    """Markup emitted verbatim (script bodies, comments from parsed pages)."""


Node = Union['Element', str]
Listener = Callable[['Element'], None]


@dataclass(frozen=True)
class ScrollRequest:
    """A request to bring an element into the viewport."""
    behavior: str
    block: str


class Element:
    """A page element with classes, inline display style and click listeners."""

    def __init__(
        self,
        tag: str,
        class_name: str = '',
        element_id: Optional[str] = None,
        attrs: Optional[Dict[str, Optional[str]]] = None,
        text: Optional[str] = None,
    ):
        self.tag = tag
        self.attrs: Dict[str, Optional[str]] = dict(attrs or {})
        self._classes: List[str] = class_name.split()
        self.style: Dict[str, str] = {}
        self.children: List[Node] = []
        self.parent: Optional[Element] = None
        self.scroll_requests: List[ScrollRequest] = []
        self._listeners: Dict[str, List[Listener]] = {}

        if 'class' in self.attrs:
            self._classes.extend(c for c in (self.attrs.pop('class') or '').split() if c not in self._classes)
        if 'style' in self.attrs:
            self.style = _parse_style(self.attrs.pop('style') or '')
        if element_id is not None:
            self.attrs['id'] = element_id
        if text is not None:
            self.append_text(text)

    def __repr__(self):
        ident = f"#{self.id}" if self.id else ''
        classes = ''.join(f".{c}" for c in self._classes)
        return f"<Element {self.tag}{ident}{classes}>"

    # -------------------------------------------------------------------------
    # Identity & classes
    # -------------------------------------------------------------------------

    @property
    def id(self) -> Optional[str]:
        return self.attrs.get('id')

    @property
    def class_list(self) -> Tuple[str, ...]:
        return tuple(self._classes)

    def has_class(self, name: str) -> bool:
        return name in self._classes

    def add_class(self, name: str) -> None:
        if name not in self._classes:
            self._classes.append(name)

    def remove_class(self, name: str) -> None:
        if name in self._classes:
            self._classes.remove(name)

    @property
    def display(self) -> Optional[str]:
        return self.style.get('display')

    @display.setter
    def display(self, value: Optional[str]) -> None:
        if value is None:
            self.style.pop('display', None)
        else:
            self.style['display'] = value

    # -------------------------------------------------------------------------
    # Tree
    # -------------------------------------------------------------------------

    def append_child(self, child: Node) -> Node:
        if isinstance(child, Element):
            if child.parent is not None:
                child.parent.remove_child(child)
            child.parent = self
        self.children.append(child)
        return child

    def append_text(self, text: str) -> None:
        self.children.append(text)

    def remove_child(self, child: 'Element') -> None:
        for index, existing in enumerate(self.children):
            if existing is child:
                del self.children[index]
                child.parent = None
                return
        raise ValueError(f"{child!r} is not a child of {self!r}")

    def clear(self) -> None:
        for child in self.children:
            if isinstance(child, Element):
                child.parent = None
        self.children = []

    @property
    def element_children(self) -> List['Element']:
        return [c for c in self.children if isinstance(c, Element)]

    @property
    def text_content(self) -> str:
        parts = []
        for child in self.children:
            if isinstance(child, Element):
                parts.append(child.text_content)
            elif not isinstance(child, RawText):
                parts.append(child)
        return ''.join(parts)

    def iter_descendants(self) -> Iterator['Element']:
        for child in self.children:
            if isinstance(child, Element):
                yield child
                yield from child.iter_descendants()

    def find_all_by_class(self, name: str) -> List['Element']:
        return [e for e in self.iter_descendants() if e.has_class(name)]

    def find_by_class(self, name: str) -> Optional['Element']:
        return next((e for e in self.iter_descendants() if e.has_class(name)), None)

    def find_by_id(self, element_id: str) -> Optional['Element']:
        return next((e for e in self.iter_descendants() if e.id == element_id), None)

    def query_selector(self, selector: str) -> Optional['Element']:
        """First descendant matching a simple `tag`, `.class`, `#id` or `tag.class` selector."""
        match = _compile_selector(selector)
        return next((e for e in self.iter_descendants() if match(e)), None)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def add_event_listener(self, event: str, listener: Listener) -> None:
        self._listeners.setdefault(event, []).append(listener)

    def remove_event_listener(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def dispatch_event(self, event: str) -> None:
        for listener in list(self._listeners.get(event, [])):
            listener(self)

    def click(self) -> None:
        self.dispatch_event('click')

    def scroll_into_view(self, behavior: str = 'auto', block: str = 'start') -> None:
        self.scroll_requests.append(ScrollRequest(behavior=behavior, block=block))

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_html(self) -> str:
        if self.tag == ROOT_TAG:
            return ''.join(_serialize(c, raw=False) for c in self.children)

        attrs = []
        if self._classes:
            attrs.append(('class', ' '.join(self._classes)))
        attrs.extend(self.attrs.items())
        if self.style:
            attrs.append(('style', '; '.join(f"{k}: {v}" for k, v in self.style.items())))

        rendered_attrs = ''.join(
            f" {name}" if value is None else f' {name}="{html.escape(value, quote=True)}"'
            for name, value in attrs
        )
        opening = f"<{self.tag}{rendered_attrs}>"
        if self.tag in VOID_ELEMENTS:
            return opening

        raw = self.tag in RAW_TEXT_ELEMENTS
        inner = ''.join(_serialize(c, raw=raw) for c in self.children)
        return f"{opening}{inner}</{self.tag}>"


def _serialize(node: Node, raw: bool) -> str:
    if isinstance(node, Element):
        return node.to_html()
    if raw or isinstance(node, RawText):
        return str(node)
    return html.escape(node, quote=False)


def _parse_style(style: str) -> Dict[str, str]:
    declarations = {}
    for declaration in style.split(';'):
        if ':' in declaration:
            name, value = declaration.split(':', 1)
            declarations[name.strip().lower()] = value.strip()
    return declarations


def _compile_selector(selector: str) -> Callable[[Element], bool]:
    selector = selector.strip()
    if selector.startswith('#'):
        element_id = selector[1:]
        return lambda e: e.id == element_id

    tag, _, class_part = selector.partition('.')
    classes = [c for c in class_part.split('.') if c]
    tag = tag.lower()

    def match(element: Element) -> bool:
        if tag and element.tag != tag:
            return False
        return all(element.has_class(c) for c in classes)

    return match


# =============================================================================
# DOCUMENT
# =============================================================================

class Document:
    """
    A page: a root fragment plus optional doctype.

    Locates the render target and toggle affordances for the loader.
    """

    def __init__(self, root: Optional[Element] = None, doctype: Optional[str] = None):
        self.root = root if root is not None else Element(ROOT_TAG)
        self.doctype = doctype

    def query_selector(self, selector: str) -> Optional[Element]:
        return self.root.query_selector(selector)

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        return self.root.find_by_id(element_id)

    def to_html(self) -> str:
        prefix = f"<!{self.doctype}>" if self.doctype else ''
        return prefix + self.root.to_html()

    @classmethod
    def from_markup(cls, markup: str) -> 'Document':
        builder = _TreeBuilder()
        builder.feed(markup)
        builder.close()
        return cls(root=builder.root, doctype=builder.doctype)


class _TreeBuilder(HTMLParser):
    """Tolerant HTML to Element tree builder."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.root = Element(ROOT_TAG)
        self.doctype: Optional[str] = None
        self._stack: List[Element] = [self.root]

    @property
    def _current(self) -> Element:
        return self._stack[-1]

    def handle_starttag(self, tag, attrs):
        element = Element(tag, attrs=dict(attrs))
        self._current.append_child(element)
        if tag not in VOID_ELEMENTS:
            self._stack.append(element)

    def handle_startendtag(self, tag, attrs):
        self._current.append_child(Element(tag, attrs=dict(attrs)))

    def handle_endtag(self, tag):
        for depth in range(len(self._stack) - 1, 0, -1):
            if self._stack[depth].tag == tag:
                del self._stack[depth:]
                return

    def handle_data(self, data):
        if self._current.tag in RAW_TEXT_ELEMENTS:
            self._current.append_text(RawText(data))
        else:
            self._current.append_text(data)

    def handle_comment(self, data):
        self._current.append_text(RawText(f"<!--{data}-->"))

    def handle_decl(self, decl):
        self.doctype = decl
