import re
from typing import List, Pattern

# --- REGEX REGISTRY ---

# 1. LABELS
# foo:   .LBB0_1:   .proc main:
RE_LABEL_DEF = re.compile(r"^(?:\.proc\s+)?([.a-z_$@][a-z0-9$_@.]*):", re.IGNORECASE)
RE_INDENTED_LABEL_DEF = re.compile(r"^\s*([$.A-Z_a-z][\w$.]*):")
# name = expr
RE_ASSIGNMENT_DEF = re.compile(r"^\s*([$.A-Z_a-z][\w$.]*)\s*=")

# MIPS labels may start with '$'; everywhere else '$' introduces a literal
RE_LABEL_FIND_DEFAULT = re.compile(r"[.A-Z_a-z][\w$.]*")
RE_LABEL_FIND_MIPS = re.compile(r"[$.A-Z_a-z][\w$.]*")
RE_MIPS_LABEL_DEF = re.compile(r"^\$[\w$.]+:")

# Operand identifiers, used for hyperlinkable label references
RE_IDENTIFIER = re.compile(r"[$.@A-Z_a-z][\w$.@]*")

# 2. EXPORTS & FUNCTIONS
RE_DEFINES_GLOBAL = re.compile(r"^\s*\.(?:globa?l|GLB|export)\s*([.A-Z_a-z][\w$.]*)")
RE_DEFINES_WEAK = re.compile(r"^\s*\.(?:weakext|weak)\s*([.A-Z_a-z][\w$.]*)")
RE_DEFINES_FUNCTION = re.compile(r"^\s*\.(type.*,\s*[#%@]function|proc\s+[.A-Z_a-z][\w$.]*:.*)$")

# 3. DIRECTIVES
RE_DIRECTIVE = re.compile(r"^\s*\..*$")
RE_DATA_DEFN = re.compile(r"^\s*\.(string|asciz|ascii|[1248]?byte|short|x?word|long|quad|value|zero)")
# .inst emits an opcode even though it looks like a directive
RE_INST_OPCODE = re.compile(r"(\.inst\.?\w?)\s*(.*)")
RE_FILE = re.compile(r"^\s*\.file\s+(\d+)\s+\"([^\"]+)\"(\s+\"([^\"]+)\")?.*")

# 4. OPCODES
# LLVM IR style `%blah = opcode` counts as an opcode
RE_HAS_OPCODE = re.compile(r"^\s*(%[$.A-Z_a-z][\w$.]*\s*=\s*)?[A-Za-z]")
RE_HAS_NVCC_OPCODE = re.compile(r"^\s*[@A-Za-z|]")
RE_INSTRUCTION = re.compile(r"^\s*[A-Za-z]+")
RE_COMMENT = re.compile(r"[#;]")

# 5. BLOCKS
RE_START_APP_BLOCK = re.compile(r"\s*#APP.*")
RE_END_APP_BLOCK = re.compile(r"\s*#NO_APP.*")
RE_START_ASM_NESTING = re.compile(r"\s*# Begin ASM.*")
RE_END_ASM_NESTING = re.compile(r"\s*# End ASM.*")
RE_CUDA_BEGIN_DEF = re.compile(r"\.(entry|func)\s+(?:\([^)]*\)\s*)?([$.A-Z_a-z][\w$.]*)\($")
RE_CUDA_END_DEF = re.compile(r"^\s*\)\s*$")
RE_END_BLOCK = re.compile(r"^\s*\.(cfi_endproc|data|text|section)\b")

# 6. COMMENTS
# '#', '@', '//' or a single ';' lead a comment; ';;' only with content after it
RE_COMMENT_ONLY = re.compile(r"^\s*(((#|@|//).*)|(/\*.*\*/)|(;\s*)|(;[^;].*)|(;;.*\S.*))$")
RE_COMMENT_ONLY_NVCC = re.compile(r"^\s*(((#|;|//).*)|(/\*.*\*/))$")
RE_BLOCK_COMMENTS = re.compile(r"^[\t ]*/\*(\*(?!/)|[^*])*\*/\s*", re.MULTILINE)

# 7. DEBUG LOCATIONS
RE_SOURCE_TAG = re.compile(r"^\s*\.loc\s+(\d+)\s+(\d+).*")
RE_SOURCE_D2_TAG = re.compile(r"^\s*\.d2line\s+(\d+),?\s*(\d*).*")
RE_SOURCE_STAB = re.compile(r"^\s*\.stabn\s+(\d+),0,(\d+),.*")
RE_SOURCE_6502_DBG = re.compile(r"^\s*\.dbg\s+line,\s*\"([^\"]+)\",\s*(\d+)")
RE_SOURCE_6502_DBG_END = re.compile(r"^\s*\.dbg\s+line\b(?!\s*,)")
RE_STDIN_LOOKING = re.compile(r".*<stdin>|^-$|example\.[^/]+$|<source>")

# 8. BINARY LISTINGS (objdump -d -l)
RE_BINARY_SOURCE = re.compile(r"^(/[^:]+):(\d+).*")
RE_BINARY_FUNCTION = re.compile(r"^([\da-f]+)\s+<([^>]+)>:$")
RE_BINARY_OPCODE = re.compile(r"^\s*([\da-f]+):\s*(([\da-f]{2} ?)+)\s*(.*)")
RE_BINARY_DEST = re.compile(r"\s([\da-f]+)\s+<([^+>]+)(\+0x[\da-f]+)?>$")


def strip_comment(line: str) -> str:
    return RE_COMMENT.split(line, maxsplit=1)[0]


def is_custom_block_start(line: str) -> bool:
    return bool(RE_START_APP_BLOCK.match(line) or RE_START_ASM_NESTING.match(line))


def is_custom_block_end(line: str) -> bool:
    return bool(RE_END_APP_BLOCK.match(line) or RE_END_ASM_NESTING.match(line))


def custom_block_depth(line: str, depth: int) -> int:
    """Nesting depth of #APP / Begin ASM regions once this line is seen."""
    if is_custom_block_start(line):
        return depth + 1
    if is_custom_block_end(line):
        return depth - 1
    return depth


def is_synthetic_path(path: str) -> bool:
    """True for stdin-like paths that carry no useful file name."""
    return bool(RE_STDIN_LOOKING.search(path))


def label_finder_for(lines: List[str]) -> Pattern:
    """Pick the identifier grammar once for the whole document."""
    # PTX names such as $L__BB0_2 carry the '$' too
    if any(RE_MIPS_LABEL_DEF.match(line) or RE_CUDA_BEGIN_DEF.search(line) for line in lines):
        return RE_LABEL_FIND_MIPS
    return RE_LABEL_FIND_DEFAULT


class Dialect:
    """
    Recognizers that differ between assembler flavours.

    One instance is chosen per region of the document, so the per-line
    code calls these methods without re-checking which flavour it is in.
    """

    name = "default"
    comment_only_re = RE_COMMENT_ONLY
    opcode_re = RE_HAS_OPCODE

    def is_comment_only(self, line: str) -> bool:
        return bool(self.comment_only_re.match(line))

    def has_opcode(self, line: str) -> bool:
        match = RE_LABEL_DEF.match(line)
        if match:
            line = line[match.end():]
        line = strip_comment(line)
        if RE_INST_OPCODE.search(line):
            return True
        # An assignment is not an opcode
        if RE_ASSIGNMENT_DEF.match(line):
            return False
        return bool(self.opcode_re.match(line))

    def closes_block(self, line: str) -> bool:
        return bool(RE_END_BLOCK.match(line))


class NvccDialect(Dialect):
    """PTX emitted by nvcc, inside a `.entry`/`.func` body."""

    name = "nvcc"
    comment_only_re = RE_COMMENT_ONLY_NVCC
    opcode_re = RE_HAS_NVCC_OPCODE

    def closes_block(self, line: str) -> bool:
        return super().closes_block(line) or "}" in line


DEFAULT_DIALECT = Dialect()
NVCC_DIALECT = NvccDialect()
