from __future__ import annotations

import dataclasses
import fnmatch
from types import MappingProxyType
from typing import Mapping

_EXTENSION_LANGUAGES = {
    ".py": "Python",
    ".pyi": "Python",
    ".pyx": "Cython",
    ".pxd": "Cython",
    ".ipynb": "Jupyter Notebook",
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".mjs": "JavaScript",
    ".cjs": "JavaScript",
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".mts": "TypeScript",
    ".cts": "TypeScript",
    ".coffee": "CoffeeScript",
    ".java": "Java",
    ".kt": "Kotlin",
    ".kts": "Kotlin",
    ".groovy": "Groovy",
    ".gradle": "Gradle",
    ".scala": "Scala",
    ".sc": "Scala",
    ".clj": "Clojure",
    ".cljs": "Clojure",
    ".cljc": "Clojure",
    ".edn": "Clojure",
    ".swift": "Swift",
    ".go": "Go",
    ".rs": "Rust",
    ".zig": "Zig",
    ".nim": "Nim",
    ".v": "Verilog",
    ".sv": "SystemVerilog",
    ".vhd": "VHDL",
    ".vhdl": "VHDL",
    ".php": "PHP",
    ".phtml": "PHP",
    ".rb": "Ruby",
    ".rake": "Ruby",
    ".gemspec": "Ruby",
    ".erb": "HTML+ERB",
    ".cs": "C#",
    ".csx": "C#",
    ".fs": "F#",
    ".fsi": "F#",
    ".fsx": "F#",
    ".vb": "Visual Basic .NET",
    ".c": "C",
    ".h": "C",
    ".cc": "C++",
    ".cpp": "C++",
    ".cxx": "C++",
    ".c++": "C++",
    ".hpp": "C++",
    ".hh": "C++",
    ".hxx": "C++",
    ".ino": "C++",
    ".cu": "Cuda",
    ".cuh": "Cuda",
    ".m": "Objective-C",
    ".mm": "Objective-C++",
    ".d": "D",
    ".f": "Fortran",
    ".f90": "Fortran",
    ".f95": "Fortran",
    ".asm": "Assembly",
    ".s": "Assembly",
    ".pas": "Pascal",
    ".ada": "Ada",
    ".adb": "Ada",
    ".ads": "Ada",
    ".cob": "COBOL",
    ".cbl": "COBOL",
    ".lua": "Lua",
    ".pl": "Perl",
    ".pm": "Perl",
    ".t": "Perl",
    ".raku": "Raku",
    ".r": "R",
    ".rmd": "RMarkdown",
    ".jl": "Julia",
    ".dart": "Dart",
    ".ex": "Elixir",
    ".exs": "Elixir",
    ".eex": "HTML+EEX",
    ".heex": "HTML+EEX",
    ".erl": "Erlang",
    ".hrl": "Erlang",
    ".hs": "Haskell",
    ".lhs": "Haskell",
    ".elm": "Elm",
    ".ml": "OCaml",
    ".mli": "OCaml",
    ".re": "Reason",
    ".purs": "PureScript",
    ".lisp": "Common Lisp",
    ".cl": "Common Lisp",
    ".el": "Emacs Lisp",
    ".scm": "Scheme",
    ".rkt": "Racket",
    ".tcl": "Tcl",
    ".awk": "Awk",
    ".sh": "Shell",
    ".bash": "Shell",
    ".zsh": "Shell",
    ".ksh": "Shell",
    ".fish": "fish",
    ".ps1": "PowerShell",
    ".psm1": "PowerShell",
    ".psd1": "PowerShell",
    ".bat": "Batchfile",
    ".cmd": "Batchfile",
    ".mk": "Makefile",
    ".mak": "Makefile",
    ".cmake": "CMake",
    ".bzl": "Starlark",
    ".nix": "Nix",
    ".dockerfile": "Dockerfile",
    ".tf": "HCL",
    ".tfvars": "HCL",
    ".hcl": "HCL",
    ".sql": "SQL",
    ".psql": "PLpgSQL",
    ".plsql": "PLSQL",
    ".graphql": "GraphQL",
    ".gql": "GraphQL",
    ".proto": "Protocol Buffer",
    ".thrift": "Thrift",
    ".avsc": "JSON",
    ".json": "JSON",
    ".jsonc": "JSON with Comments",
    ".json5": "JSON5",
    ".yml": "YAML",
    ".yaml": "YAML",
    ".toml": "TOML",
    ".ini": "INI",
    ".cfg": "INI",
    ".properties": "Java Properties",
    ".xml": "XML",
    ".xsd": "XML",
    ".xsl": "XSLT",
    ".xslt": "XSLT",
    ".plist": "XML Property List",
    ".csv": "CSV",
    ".tsv": "TSV",
    ".md": "Markdown",
    ".markdown": "Markdown",
    ".mdx": "MDX",
    ".rst": "reStructuredText",
    ".adoc": "AsciiDoc",
    ".asciidoc": "AsciiDoc",
    ".org": "Org",
    ".tex": "TeX",
    ".bib": "BibTeX",
    ".txt": "Text",
    ".html": "HTML",
    ".htm": "HTML",
    ".xhtml": "HTML",
    ".css": "CSS",
    ".scss": "SCSS",
    ".sass": "Sass",
    ".less": "Less",
    ".styl": "Stylus",
    ".vue": "Vue",
    ".svelte": "Svelte",
    ".astro": "Astro",
    ".hbs": "Handlebars",
    ".handlebars": "Handlebars",
    ".mustache": "Mustache",
    ".j2": "Jinja",
    ".jinja": "Jinja",
    ".jinja2": "Jinja",
    ".twig": "Twig",
    ".pug": "Pug",
    ".haml": "Haml",
    ".slim": "Slim",
    ".svg": "SVG",
    ".sol": "Solidity",
    ".wat": "WebAssembly",
    ".glsl": "GLSL",
    ".hlsl": "HLSL",
    ".vim": "Vim Script",
    ".applescript": "AppleScript",
}


def build_language_table() -> Mapping[str, str]:
    """Extension -> lower-cased language name. The returned mapping is read-only."""
    return MappingProxyType({ext.lower(): lang.lower() for ext, lang in _EXTENSION_LANGUAGES.items()})


def extension_of(path: str) -> str:
    base = path.replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in base:
        return ""
    return "." + base.rsplit(".", 1)[1]


def language_for_path(path: str, table: Mapping[str, str]) -> str:
    return table.get(extension_of(path).lower(), "")


def matches_any(path: str, globs: tuple[str, ...]) -> bool:
    return any(pat and fnmatch.fnmatch(path, pat) for pat in globs)


@dataclasses.dataclass(frozen=True)
class FileFilter:
    extensions: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    restrict_to: tuple[str, ...] = ()
    language_table: Mapping[str, str] = dataclasses.field(default_factory=build_language_table)

    def accepts(self, path: str) -> bool:
        if self.extensions and extension_of(path) not in self.extensions:
            return False
        if self.languages:
            lang = language_for_path(path, self.language_table)
            if not lang or lang not in {x.lower() for x in self.languages}:
                return False
        if self.exclude and matches_any(path, self.exclude):
            return False
        if self.restrict_to and not matches_any(path, self.restrict_to):
            return False
        return True
