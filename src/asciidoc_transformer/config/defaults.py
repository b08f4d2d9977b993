"""Package-level default configuration values."""

from __future__ import annotations

import copy
from typing import Any

# Built-in processor options
DEFAULT_BACKEND = "html5"
DEFAULT_PARSE = True
DEFAULT_SAFE_MODE = "safe"
DEFAULT_PRISM = True
PRISM_LANGUAGES = (
    "markup,html,xml,svg,mathml,css,clike,javascript,js,ada,apacheconf,applescript,arduino,"
    "asciidoc,adoc,aspnet,bash,shell,batch,bison,brightscript,c,csharp,cs,dotnet,cpp,"
    "coffeescript,coffee,cmake,clojure,css-extras,d,dart,diff,django,jinja2,dns-zone,docker,"
    "dockerfile,elixir,elm,erb,erlang,xlsx,xls,fsharp,fortran,gcode,git,glsl,go,graphql,groovy,"
    "haml,handlebars,haskell,hs,hcl,http,hpkp,hsts,icon,ini,io,java,javadoc,javadoclike,jq,"
    "jsdoc,json,jsonp,json5,julia,kotlin,latex,tex,context,latte,less,llvm,lua,makefile,"
    "markdown,md,matlab,nasm,neon,nginx,objectivec,ocaml,opencl,parser,pascal,objectpascal,"
    "perl,php,phpdoc,php-extras,plsql,powerquery,pq,powershell,processing,properties,protobuf,"
    "pug,puppet,pure,python,py,q,qml,r,jsx,tsx,reason,regex,rest,ruby,rb,rust,sas,sass,scss,"
    "scala,scheme,shell-session,solidity,solution-file,sln,soy,splunk-spl,sql,stylus,swift,tap,"
    "tcl,textile,toml,turtle,trig,twig,typescript,ts,vala,vbnet,velocity,verilog,vhdl,vim,"
    "visual-basic,vb,wasm,wiki,xeora,xeoracube,xojo,xquery,yaml,yml,zig"
)

# Derived views
DEFAULT_WORDS_PER_MINUTE = 230

# Memo cache
DEFAULT_CACHE_MAX_ENTRIES = 1000
DEFAULT_CACHE_DISABLED = False

# Log level
DEFAULT_LOG_LEVEL = "WARNING"

_DEFAULT_OPTIONS: dict[str, Any] = {
    "backend": DEFAULT_BACKEND,
    "parse": DEFAULT_PARSE,
    "safe": DEFAULT_SAFE_MODE,
    "prism": DEFAULT_PRISM,
    "attributes": {
        "source-highlighter": "prism",
        "prism-languages": PRISM_LANGUAGES,
    },
}


def get_default_options() -> dict[str, Any]:
    """Return the built-in transformer options (a fresh copy, safe to mutate)."""
    return copy.deepcopy(_DEFAULT_OPTIONS)


def get_defaults() -> dict[str, Any]:
    """Return CLI/runtime defaults as a flat dictionary for merging."""
    return {
        "words_per_minute": DEFAULT_WORDS_PER_MINUTE,
        "cache_max_entries": DEFAULT_CACHE_MAX_ENTRIES,
        "cache_disabled": DEFAULT_CACHE_DISABLED,
        "log_level": DEFAULT_LOG_LEVEL,
        "options": {},
    }
