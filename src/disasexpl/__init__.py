from .parsing import AsmParser, FilterConfig, ParseResult, process_assembly, render_lines

__all__ = ["AsmParser", "FilterConfig", "ParseResult", "process_assembly", "render_lines"]
