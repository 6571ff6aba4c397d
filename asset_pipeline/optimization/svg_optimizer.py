"""Multi-pass SVG minification."""
import re

from lxml import etree

from ..utils.logger import get_logger

logger = get_logger(__name__)

EDITOR_NAMESPACES = {
    "http://www.inkscape.org/namespaces/inkscape",
    "http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd",
    "http://ns.adobe.com/AdobeIllustrator/10.0/",
    "http://www.bohemiancoding.com/sketch/ns",
}
COORDINATE_ATTRIBS = (
    "x", "y", "x1", "y1", "x2", "y2", "cx", "cy", "r", "rx", "ry",
    "width", "height",
)
# Elements whose whitespace is rendered content
TEXT_ELEMENTS = {"text", "tspan", "textPath", "title", "desc", "style", "script"}
PATH_COMMANDS = "MmZzLlHhVvCcSsQqTtAa"
NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
SEPARATOR_RE = re.compile(r"[\s,]*")
TRANSFORM_RE = re.compile(r"([A-Za-z]+)\s*\(([^)]*)\)")
XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"


def _local_name(tag) -> str:
    if not isinstance(tag, str):
        return ""
    return etree.QName(tag).localname


def _namespace(tag) -> str:
    if not isinstance(tag, str):
        return ""
    return etree.QName(tag).namespace or ""


def _in_text(elem) -> bool:
    """True when ``elem`` is a text-bearing element or sits inside one."""
    while elem is not None:
        if _local_name(elem.tag) in TEXT_ELEMENTS:
            return True
        elem = elem.getparent()
    return False


def tokenize_numbers(value: str, commands: bool = True):
    """
    Split path data or a number list into ``(kind, text)`` tokens.

    Kinds are ``cmd``, ``num`` and ``flag``. The two flags of every arc
    segment are read as single characters, so ``0 01`` is three tokens.
    Raises ValueError on anything that is not valid path syntax.
    """
    tokens = []
    command = ""
    arg_index = 0
    pos = 0
    while True:
        pos = SEPARATOR_RE.match(value, pos).end()
        if pos >= len(value):
            return tokens
        char = value[pos]
        if commands and char in PATH_COMMANDS:
            tokens.append(("cmd", char))
            command = char.lower()
            arg_index = 0
            pos += 1
            continue
        if command == "a" and arg_index % 7 in (3, 4):
            if char not in "01":
                raise ValueError(f"Bad arc flag {char!r} at {pos}")
            tokens.append(("flag", char))
            arg_index += 1
            pos += 1
            continue
        match = NUMBER_RE.match(value, pos)
        if not match:
            raise ValueError(f"Unexpected {char!r} at {pos}")
        tokens.append(("num", match.group()))
        arg_index += 1
        pos = match.end()


class SVGOptimizer:
    """Apply structural and text-level optimizations to an SVG document."""

    def __init__(self, config: dict):
        opt_cfg = config.get("optimization", {})
        self.passes = max(1, int(opt_cfg.get("passes", 10)))
        self.precision = opt_cfg.get("coordinate_precision", 3)
        self.remove_viewbox = opt_cfg.get("remove_viewbox", True)
        self._parser = etree.XMLParser(
            remove_comments=True,
            remove_pis=True,
            resolve_entities=False,
            huge_tree=True,
        )

    def optimize(self, svg_string, keep_viewbox: bool = None) -> str:
        """
        Minify an SVG document, repeating until a pass makes no change.

        Args:
            svg_string: SVG source as str or bytes.
            keep_viewbox: Overrides the configured viewBox removal.

        Returns:
            Minified SVG string without XML declaration.
        """
        if keep_viewbox is None:
            keep_viewbox = not self.remove_viewbox
        if isinstance(svg_string, str):
            svg_string = svg_string.encode("utf-8")

        root = etree.fromstring(svg_string, self._parser)
        current = self._serialize(root)

        for i in range(self.passes):
            self._remove_editor_data(root)
            self._remove_metadata(root)
            self._remove_empty_containers(root)
            self._cleanup_attributes(root)
            if not keep_viewbox:
                self._remove_viewbox(root)
            self._strip_blank_text(root)

            result = self._serialize(root)
            if result == current:
                logger.debug(f"SVG optimization converged after {i + 1} passes")
                break
            current = result
            root = etree.fromstring(result.encode("utf-8"), self._parser)

        return current

    @staticmethod
    def _serialize(root) -> str:
        return etree.tostring(root, encoding="unicode").strip()

    def _remove_editor_data(self, root) -> None:
        """Drop elements and attributes from editor-private namespaces."""
        for elem in list(root.iter()):
            if _namespace(elem.tag) in EDITOR_NAMESPACES:
                elem.getparent().remove(elem)
                continue
            for name in list(elem.attrib):
                if _namespace(name) in EDITOR_NAMESPACES:
                    del elem.attrib[name]
        etree.cleanup_namespaces(root)

    def _remove_metadata(self, root) -> None:
        for elem in list(root.iter()):
            if _local_name(elem.tag) == "metadata" and elem.getparent() is not None:
                elem.getparent().remove(elem)

    def _remove_empty_containers(self, root) -> None:
        """Remove <g> and <defs> elements that contain no children."""
        for elem in list(root.iter()):
            if _local_name(elem.tag) not in ("g", "defs"):
                continue
            if len(elem) == 0 and not (elem.text or "").strip():
                parent = elem.getparent()
                if parent is not None:
                    parent.remove(elem)

    def _strip_blank_text(self, root) -> None:
        """Drop whitespace-only text between tags, outside text content."""
        for elem in root.iter():
            if not isinstance(elem.tag, str):
                continue
            if elem.text is not None and not elem.text.strip() and not _in_text(elem):
                elem.text = None
            parent = elem.getparent()
            if elem.tail is not None and not elem.tail.strip():
                if parent is None or not _in_text(parent):
                    elem.tail = None

    def _cleanup_attributes(self, root) -> None:
        if "version" in root.attrib:
            del root.attrib["version"]
        for elem in root.iter():
            if not isinstance(elem.tag, str):
                continue
            if XML_SPACE in elem.attrib and not any(
                _local_name(e.tag) in TEXT_ELEMENTS for e in elem.iter()
            ):
                del elem.attrib[XML_SPACE]
            for name, rewrite in (
                ("d", self._round_path),
                ("points", self._round_points),
                ("transform", self._round_transform),
            ):
                value = elem.get(name)
                if value is None:
                    continue
                try:
                    elem.set(name, rewrite(value))
                except ValueError as e:
                    logger.debug(f"Leaving malformed {name} untouched: {e}")
            for name in COORDINATE_ATTRIBS:
                value = elem.get(name)
                if value is not None and NUMBER_RE.fullmatch(value.strip()):
                    elem.set(name, self._format_number(value.strip()))

    def _remove_viewbox(self, root) -> None:
        """Remove viewBox when it only repeats width and height."""
        viewbox = root.get("viewBox")
        if viewbox is None:
            return
        parts = viewbox.replace(",", " ").split()
        width = root.get("width", "").replace("px", "")
        height = root.get("height", "").replace("px", "")
        try:
            values = [float(p) for p in parts]
            if len(values) == 4 and values[:2] == [0.0, 0.0]:
                if values[2] == float(width) and values[3] == float(height):
                    del root.attrib["viewBox"]
        except ValueError:
            pass

    def _round_path(self, value: str) -> str:
        return self._join(tokenize_numbers(value))

    def _round_points(self, value: str) -> str:
        return self._join(tokenize_numbers(value, commands=False))

    def _round_transform(self, value: str) -> str:
        functions = TRANSFORM_RE.findall(value)
        if TRANSFORM_RE.sub("", value).strip(" \t\r\n,"):
            raise ValueError(f"Unrecognized transform {value!r}")
        return " ".join(
            f"{name}({self._join(tokenize_numbers(args, commands=False))})"
            for name, args in functions
        )

    def _join(self, tokens) -> str:
        """
        Re-emit tokens with rounded numbers.

        A space separates any two numbers or flags unless the second starts
        with a minus sign, so rounded values can never fuse.
        """
        parts = []
        previous = None
        for kind, text in tokens:
            if kind == "num":
                text = self._format_number(text)
            if previous in ("num", "flag") and kind != "cmd" and not text.startswith("-"):
                parts.append(" ")
            parts.append(text)
            previous = kind
        return "".join(parts)

    def _format_number(self, text: str) -> str:
        """Round one number to the set precision, trimming trailing zeros."""
        if "e" in text or "E" in text:
            return text.lstrip("+")
        number = float(text)
        precision = self.precision
        if precision == 0:
            formatted = str(int(round(number)))
        else:
            formatted = f"{round(number, precision):.{precision}f}"
            formatted = formatted.rstrip("0").rstrip(".")
        if formatted == "-0":
            formatted = "0"
        return formatted
