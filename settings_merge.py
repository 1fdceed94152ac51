#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
settings_merge.py

engines/*.xml（エンジン定義の断片）を ShogiGUI の settings.xml の EngineList に追加する。
同名（Name）のエンジンが既にあれば追加しない。何度実行しても結果は同じ。

- 重複判定: 最初の <EngineList> の直下の要素の <Name> を比較する（前後の空白は無視）。
  EngineList の外にある <Name>（他の設定項目）は対象外。
- 書き換え: DOM はコンテナの検出と名前の確認にだけ使い、ファイルへは元のバイト列に
  断片のテキストを差し込む。EngineList の外と既存のエンジン定義は1バイトも変えない。
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union
from xml.dom import minidom
from xml.parsers import expat
from xml.parsers.expat import ExpatError

from constants import ENGINE_LIST_TAG, ENGINE_NAME_TAG, INDENT_UNIT
from helpers import log_info, log_ok, log_warn
from models import Config, EngineDescriptor, MergeResult
from paths import engines_dir, ensure_settings_file


# ----------------- DOM helpers -----------------

def _child_elements(node) -> List:
    return [c for c in node.childNodes if c.nodeType == c.ELEMENT_NODE]


def _child_text(elem, tag: str) -> Optional[str]:
    for c in _child_elements(elem):
        if c.tagName == tag:
            parts = [
                t.data for t in c.childNodes
                if t.nodeType in (t.TEXT_NODE, t.CDATA_SECTION_NODE)
            ]
            return "".join(parts).strip()
    return None


def find_engine_list(doc):
    found = doc.getElementsByTagName(ENGINE_LIST_TAG)
    if not found:
        raise ValueError(f"settings document has no <{ENGINE_LIST_TAG}> element")
    return found[0]


def existing_engine_names(container) -> List[str]:
    names = []
    for elem in _child_elements(container):
        name = _child_text(elem, ENGINE_NAME_TAG)
        if name:
            names.append(name)
    return names


# ----------------- byte offsets -----------------

def _start_tag_end(raw: bytes, pos: int) -> int:
    """Offset just past the '>' of the start tag at `pos` (quotes respected)."""
    quote = None
    for i in range(pos, len(raw)):
        c = raw[i:i + 1]
        if quote is not None:
            if c == quote:
                quote = None
        elif c in (b'"', b"'"):
            quote = c
        elif c == b">":
            return i + 1
    raise ValueError("unterminated start tag")


def element_span(raw: bytes, tag: Optional[str] = None) -> Tuple[int, int, Optional[int], int]:
    """
    Locate the first element named `tag` (the root element when None).

    Returns (start, open_end, close_start, end): the start tag is
    raw[start:open_end], the end tag starts at close_start (None for an
    empty-element tag) and the element ends at `end`.
    """
    parser = expat.ParserCreate()
    found = {}
    depth = [0]

    def on_start(name, _attrs):
        depth[0] += 1
        if "start" not in found and (tag is None or name == tag):
            found["start"] = parser.CurrentByteIndex
            found["depth"] = depth[0]

    def on_end(_name):
        if found.get("depth") == depth[0] and "close" not in found:
            found["close"] = parser.CurrentByteIndex
        depth[0] -= 1

    parser.StartElementHandler = on_start
    parser.EndElementHandler = on_end
    try:
        parser.Parse(raw, True)
    except ExpatError as e:
        raise ValueError(f"not a well-formed XML document ({e})") from e
    if "start" not in found:
        raise ValueError(f"no <{tag}> element")

    start = found["start"]
    name = (tag or "").encode("ascii")
    if raw[start:start + 1] != b"<" or not raw.startswith(b"<" + name, start):
        raise ValueError("could not locate element in the document bytes")

    open_end = _start_tag_end(raw, start)
    if raw[open_end - 2:open_end] == b"/>":
        return start, open_end, None, open_end
    close = found["close"]
    return start, open_end, close, _start_tag_end(raw, close)


def _newline_of(raw: bytes) -> bytes:
    return b"\r\n" if b"\r\n" in raw else b"\n"


def _line_indent(raw: bytes, pos: int) -> bytes:
    """Whitespace between the previous line break and `pos` ('' if other text is in between)."""
    i = pos
    while i > 0 and raw[i - 1:i] in (b" ", b"\t"):
        i -= 1
    if i == 0 or raw[i - 1:i] == b"\n":
        return raw[i:pos]
    return b""


def _reindent(text: str, prefix: str, newline: str) -> str:
    # 断片ファイルは0桁目から書かれている前提で、2行目以降を挿入位置の深さまでずらす
    lines = text.splitlines()
    out = lines[:1] + [(prefix + ln) if ln.strip() else "" for ln in lines[1:]]
    return newline.join(out)


# ----------------- fragments -----------------

def list_engine_fragments(directory: Optional[Path] = None) -> List[Path]:
    d = directory if directory is not None else engines_dir()
    if not d.is_dir():
        return []
    return sorted(d.glob("*.xml"))


def read_engine_fragment(path: Union[str, Path]) -> EngineDescriptor:
    p = Path(path)
    raw = p.read_bytes()
    try:
        frag = minidom.parseString(raw)
    except ExpatError as e:
        raise ValueError(f"{p}: not a well-formed XML fragment ({e})") from e
    elem = frag.documentElement
    name = _child_text(elem, ENGINE_NAME_TAG)
    if not name:
        raise ValueError(f"{p}: fragment has no <{ENGINE_NAME_TAG}>")

    start, _, _, end = element_span(raw, elem.tagName)
    encoding = getattr(frag, "encoding", None) or "utf-8"
    text = raw[start:end].decode(encoding)
    return EngineDescriptor(name=name, source=p, element=elem, text=text)


# ----------------- reconcile -----------------

def load_settings(path: Path):
    raw = path.read_bytes()
    try:
        doc = minidom.parseString(raw)
    except ExpatError as e:
        raise ValueError(f"{path}: not a well-formed XML document ({e})") from e
    return doc, raw


def splice_engines(raw: bytes, texts: List[str], encoding: str = "utf-8") -> Tuple[bytes, bool]:
    """
    Insert descriptor texts before </EngineList> and expand an empty container.

    Returns (new bytes, normalized). Bytes outside the container's inner
    content are returned unchanged.
    """
    tag = ENGINE_LIST_TAG.encode("ascii")
    start, open_end, close_start, end = element_span(raw, ENGINE_LIST_TAG)
    nl = _newline_of(raw)
    indent = _line_indent(raw, start)

    normalized = False
    if close_start is None:
        # <EngineList /> -> <EngineList>...</EngineList>
        head = raw[:start] + raw[start:open_end - 2].rstrip() + b">"
        inner = b""
        tail = b"</" + tag + b">" + raw[end:]
        normalized = True
    else:
        head = raw[:open_end]
        inner = raw[open_end:close_start]
        tail = raw[close_start:]
        if not inner.strip() and b"\n" not in inner:
            normalized = True
    if normalized:
        inner = nl + indent

    if texts:
        child_indent = indent + INDENT_UNIT.encode("ascii")
        last_break = inner.rfind(b"\n")
        if last_break >= 0 and not inner[last_break + 1:].strip():
            if last_break > 0 and inner[last_break - 1:last_break] == b"\r":
                last_break -= 1
            body, closing = inner[:last_break], inner[last_break:]
        else:
            body, closing = inner, nl + indent
        added = b"".join(
            nl + child_indent
            + _reindent(t, child_indent.decode("ascii"), nl.decode("ascii")).encode(encoding)
            for t in texts
        )
        inner = body + added + closing

    return head + inner + tail, normalized


def merge_engine_fragments(settings_path: Union[str, Path], fragment_paths: Iterable[Path]) -> MergeResult:
    """
    Add every fragment whose Name is not yet in the EngineList of `settings_path`.

    Fragments are inserted before </EngineList> in the given order. Malformed
    fragments are skipped with a warning. The file is rewritten only when
    something changed.
    """
    path = Path(settings_path)
    doc, raw = load_settings(path)
    container = find_engine_list(doc)

    result = MergeResult()
    present = set(existing_engine_names(container))
    texts: List[str] = []

    for frag_path in fragment_paths:
        try:
            desc = read_engine_fragment(frag_path)
        except ValueError as e:
            log_warn(f"skip fragment: {e}")
            result.invalid.append(Path(frag_path))
            continue

        if desc.name in present:
            result.skipped.append(desc.name)
            continue

        texts.append(desc.text)
        present.add(desc.name)
        result.added.append(desc.name)
        log_ok(f"added engine: {desc.name}")

    encoding = getattr(doc, "encoding", None) or "utf-8"
    new_raw, result.normalized = splice_engines(raw, texts, encoding)

    if not result.added:
        log_info(f"{path}: engine list already up to date")

    if result.changed:
        path.write_bytes(new_raw)
    return result


def update_settings(config: Config, fragments_dir: Optional[Path] = None) -> MergeResult:
    if ensure_settings_file(config.settings_path):
        log_info(f"created {config.settings_path} from template")
    return merge_engine_fragments(config.settings_path, list_engine_fragments(fragments_dir))
