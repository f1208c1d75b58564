"""LLVM IR emission of discovery results.

For every enum the module gets:

  @<Enum>.str.<Member>   NUL-terminated name, one per discovered member (internal)
  @<Enum>_names          [N x i8*] name table in discovery order
  @<Enum>_values         [N x iB]  underlying values, B = underlying width
  @<Enum>_count          i64 N
  @<Enum>_name(iB)       i8* lookup; returns "" for a value that is not a member

The tables and the lookup function have external linkage and C-linkable
names, so C code linked against the module can walk members without Python:

  extern const char *const Fruit_names[];
  extern const long long Fruit_count;
"""
from __future__ import annotations

import logging
from typing import Dict, List

from llvmlite import ir

from enumscan.enum_set import EnumSet
from enumscan.internals.errors import raise_internal_error
from enumscan.reflection.discovery import Discovery
from enumscan.semantics.typesys import underlying_type_of

logger = logging.getLogger(__name__)

INT8_BIT_WIDTH = 8
INT32_BIT_WIDTH = 32
INT64_BIT_WIDTH = 64


def symbol_name(enum: str, table: str) -> str:
    """Exported symbol for one of an enum's tables, e.g. ``Fruit_names``."""
    return f"{enum}_{table}"


class MemberTableCodegen:
    def __init__(self, module_name: str = "enumscan") -> None:
        self.module = ir.Module(name=module_name)
        self.i8 = ir.IntType(INT8_BIT_WIDTH)
        self.i32 = ir.IntType(INT32_BIT_WIDTH)
        self.i64 = ir.IntType(INT64_BIT_WIDTH)
        self.cstr = self.i8.as_pointer()
        self.tables: Dict[str, ir.GlobalVariable] = {}

    def _global(self, name: str, ty: ir.Type, init: ir.Constant) -> ir.GlobalVariable:
        """Private constant; only reachable through the exported tables."""
        gv = ir.GlobalVariable(self.module, ty, name=name)
        gv.linkage = 'internal'
        gv.global_constant = True
        gv.initializer = init
        gv.unnamed_addr = True
        return gv

    def _export(self, name: str, ty: ir.Type, init: ir.Constant) -> ir.GlobalVariable:
        # default linkage: external definition
        gv = ir.GlobalVariable(self.module, ty, name=name)
        gv.global_constant = True
        gv.initializer = init
        self.tables[name] = gv
        return gv

    def create_string_constant(self, name: str, value: str) -> ir.Constant:
        """Global NUL-terminated string; returns an i8* to its first byte."""
        data = bytearray(value.encode("utf-8") + b'\0')
        ty = ir.ArrayType(self.i8, len(data))
        gv = self._global(name, ty, ir.Constant(ty, data))
        zero = ir.Constant(self.i32, 0)
        return gv.gep([zero, zero])

    def emit_enum(self, discovery: Discovery) -> None:
        enum = discovery.enum_type.__name__
        value_ty = ir.IntType(underlying_type_of(discovery.enum_type).bits)

        name_ptrs: List[ir.Constant] = [
            self.create_string_constant(f"{enum}.str.{c.name}", str(c.name))
            for c in discovery.candidates
        ]
        empty = self.create_string_constant(f"{enum}.str", "")

        names_ty = ir.ArrayType(self.cstr, discovery.count)
        values_ty = ir.ArrayType(value_ty, discovery.count)
        self._export(symbol_name(enum, "names"), names_ty, ir.Constant(names_ty, name_ptrs))
        self._export(symbol_name(enum, "values"), values_ty,
                     ir.Constant(values_ty, [ir.Constant(value_ty, v) for v in discovery.values]))
        self._export(symbol_name(enum, "count"), self.i64, ir.Constant(self.i64, discovery.count))

        self._emit_name_lookup(enum, value_ty, discovery, name_ptrs, empty)
        logger.debug("emitted member table for %s (%d member(s))", enum, discovery.count)

    def _emit_name_lookup(self, enum: str, value_ty: ir.IntType, discovery: Discovery,
                          name_ptrs: List[ir.Constant], empty: ir.Constant) -> ir.Function:
        fnty = ir.FunctionType(self.cstr, [value_ty])
        fn = ir.Function(self.module, fnty, name=symbol_name(enum, "name"))
        value = fn.args[0]
        value.name = "value"

        entry = fn.append_basic_block("entry")
        missing = fn.append_basic_block("missing")
        builder = ir.IRBuilder(entry)
        switch = builder.switch(value, missing)

        for candidate, ptr in zip(discovery.candidates, name_ptrs):
            block = fn.append_basic_block(f"case.{candidate.name}")
            switch.add_case(ir.Constant(value_ty, candidate.value), block)
            ir.IRBuilder(block).ret(ptr)

        ir.IRBuilder(missing).ret(empty)
        return fn

    def lower_enum_set(self, name: str, enum_set: EnumSet) -> ir.GlobalVariable:
        """Emit ``enum_set`` as an exported iN constant, N being the set's capacity."""
        size = enum_set.size()
        if size == 0:
            raise_internal_error("CE0002", enum=enum_set.enum_type.__name__)
        ty = ir.IntType(size)
        return self._export(name, ty, ir.Constant(ty, enum_set.bits))

    def __str__(self) -> str:
        return str(self.module)


def emit_member_tables(discoveries, module_name: str = "enumscan") -> ir.Module:
    codegen = MemberTableCodegen(module_name)
    for discovery in discoveries:
        codegen.emit_enum(discovery)
    return codegen.module


def verify_module(module: ir.Module) -> None:
    """Round-trip through LLVM's parser and verifier; raises RuntimeError on failure."""
    import llvmlite.binding as llvm

    llmod = llvm.parse_assembly(str(module))
    llmod.verify()
