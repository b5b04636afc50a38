"""Source validation for rendered modules."""

from __future__ import annotations

import ast
import builtins
import importlib.util
import py_compile
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from fsmgen.errors import FormatError
from fsmgen.utils.logging import get_logger

logger = get_logger("generator.validator")

ENGINE_MODULE = "transitions"


@dataclass
class ValidationResult:
    """Result of validating generated code."""

    valid: bool = True
    syntax_errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return len(self.syntax_errors) > 0


class SourceValidator:
    """
    Validates generated Python source.

    Performs:
    - Syntax validation (py_compile)
    - AST parsing validation
    - Module-level names are bound before they are read
    - A check that the execution engine is importable (warning only)
    """

    def validate(self, source: str, filename: str = "<generated>") -> ValidationResult:
        """
        Validate one rendered module.

        Args:
            source: Python source code
            filename: File name used in error messages

        Returns:
            ValidationResult with any errors found
        """
        result = ValidationResult()

        syntax_error = self._validate_syntax(filename, source)
        if syntax_error is None:
            # Only parse the AST if py_compile passed
            syntax_error = self._validate_ast(filename, source)
        if syntax_error is None:
            syntax_error = self._check_module_names(filename, source)

        if syntax_error:
            result.syntax_errors.append(syntax_error)
            result.valid = False
            logger.warning("validation_failed", filename=filename, error=syntax_error)
            return result

        engine_warning = self._check_engine()
        if engine_warning:
            result.warnings.append(engine_warning)

        logger.debug("validation_passed", filename=filename)
        return result

    def _validate_syntax(self, filename: str, source: str) -> Optional[str]:
        """Compile the source with py_compile; return an error message or None."""
        with tempfile.NamedTemporaryFile(
            mode="w",
            suffix=".py",
            encoding="utf-8",
            delete=False,
        ) as f:
            f.write(source)
            temp_path = f.name

        try:
            py_compile.compile(temp_path, dfile=filename, doraise=True)
            return None
        except py_compile.PyCompileError as e:
            return f"{filename}: {e.msg}"
        finally:
            Path(temp_path).unlink(missing_ok=True)
            cached = importlib.util.cache_from_source(temp_path)
            Path(cached).unlink(missing_ok=True)

    def _validate_ast(self, filename: str, source: str) -> Optional[str]:
        try:
            ast.parse(source, filename=filename)
            return None
        except SyntaxError as e:
            return f"{filename}:{e.lineno}: {e.msg}"

    def _check_module_names(self, filename: str, source: str) -> Optional[str]:
        """
        Report the first name read at import time before anything binds it.

        Only statements that run on import are followed: function bodies are
        skipped, and annotations are never evaluated under
        `from __future__ import annotations`.
        """
        bound = set(dir(builtins))
        for stmt in ast.parse(source, filename=filename).body:
            if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
                reads = [*stmt.decorator_list]
            elif isinstance(stmt, ast.ClassDef):
                reads = [*stmt.decorator_list, *stmt.bases, *stmt.keywords]
            elif isinstance(stmt, ast.AnnAssign):
                reads = [stmt.value] if stmt.value is not None else []
            elif isinstance(stmt, (ast.Import, ast.ImportFrom)):
                reads = []
            else:
                reads = [stmt]

            for node in reads:
                local = _scoped_names(node)
                for name in ast.walk(node):
                    if (
                        isinstance(name, ast.Name)
                        and isinstance(name.ctx, ast.Load)
                        and name.id not in bound
                        and name.id not in local
                    ):
                        return f"{filename}:{name.lineno}: name {name.id!r} is not defined"

            bound.update(_module_bindings(stmt))
        return None

    def _check_engine(self) -> Optional[str]:
        if importlib.util.find_spec(ENGINE_MODULE) is None:
            return f"execution engine '{ENGINE_MODULE}' is not installed; generated code needs it at run time"
        return None


def ensure_valid_source(source: str, filename: str = "<generated>") -> ValidationResult:
    """
    Validate rendered source, raising on failure.

    Raises:
        FormatError: If the source does not compile or reads an undefined name
    """
    result = SourceValidator().validate(source, filename)
    if result.has_errors:
        raise FormatError("; ".join(result.syntax_errors))

    for warning in result.warnings:
        logger.warning("validation_warning", filename=filename, warning=warning)
    return result


def _module_bindings(stmt: ast.stmt) -> set[str]:
    """Names a top-level statement binds in the module namespace."""
    if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
        return {stmt.name}
    if isinstance(stmt, (ast.Import, ast.ImportFrom)):
        return {(alias.asname or alias.name).split(".")[0] for alias in stmt.names}
    return {
        node.id
        for node in ast.walk(stmt)
        if isinstance(node, ast.Name) and isinstance(node.ctx, ast.Store)
    }


def _scoped_names(node: ast.AST) -> set[str]:
    """Names bound inside comprehensions and lambdas, which never reach the module."""
    names: set[str] = set()
    for child in ast.walk(node):
        if isinstance(child, ast.comprehension):
            names.update(n.id for n in ast.walk(child.target) if isinstance(n, ast.Name))
        elif isinstance(child, ast.Lambda):
            args = child.args
            names.update(a.arg for a in [*args.posonlyargs, *args.args, *args.kwonlyargs])
            names.update(a.arg for a in (args.vararg, args.kwarg) if a is not None)
    return names
