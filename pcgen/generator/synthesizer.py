"""Python class synthesizer for persistent collections."""

import importlib.util
import logging
import os
import sys
import tempfile
import types
from pathlib import Path

from .errors import DirectoryNotWritableError
from .introspect import introspect, resolve_target
from .methods import env, generate_method, skip_reason
from .registry import GeneratedTypeRegistry
from .signature import TypeRenderer
from .types import GeneratedType, TargetType

logger = logging.getLogger(__name__)

template = env.get_template("collection.py.j2")

CLASS_SUFFIX = "Persistent"
SOURCE_EXTENSION = ".py"


def short_name(target: type | TargetType) -> str:
    """Name of the class generated for `target`.

    Different targets can map to the same name once the dots are removed.
    """
    if isinstance(target, TargetType):
        fqcn = target.fqcn
    else:
        fqcn = f"{target.__module__}.{target.__qualname__}"
    return fqcn.replace(".", "") + CLASS_SUFFIX


def render(target: TargetType, class_name: str) -> str:
    """Render the module source of the persistent collection class."""
    renderer = TypeRenderer()
    methods = [
        generate_method(method, renderer)
        for method in target.methods
        if skip_reason(method) is None
    ]
    renderer.imports.add(target.module)

    return template.render(
        class_name=class_name,
        target=target.fqcn,
        imports=sorted(renderer.imports),
        methods=methods,
    )


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def write_atomic(file_name: Path, code: str) -> None:
    """Write through a temporary file renamed into place.

    Readers see either the previous file or the new one, never a partial write.
    """
    parent = file_name.parent
    try:
        parent.mkdir(mode=0o775, parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryNotWritableError(str(parent)) from exc

    if not os.access(parent, os.W_OK):
        raise DirectoryNotWritableError(str(parent))

    fd, tmp_name = tempfile.mkstemp(prefix=f"{file_name.name}.", dir=parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(code)
        # mkstemp creates 0600 files; apply the umask like a plain open() would
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, file_name)
    except BaseException:
        os.unlink(tmp_name)
        raise


def defined_class(name: str, registry: GeneratedTypeRegistry) -> type | None:
    """Return the class `name` if this process already defined it.

    Classes defined through another registry are adopted, since their module
    already occupies `sys.modules[name]`.
    """
    if name in registry:
        return registry.get(name)

    module = sys.modules.get(name)
    if module is None:
        return None

    cls = getattr(module, name.rpartition(".")[2], None)
    if not isinstance(cls, type):
        raise ImportError(f"Module {name} is already defined without a persistent collection")
    return registry.register(name, cls)


def define(name: str, code: str, registry: GeneratedTypeRegistry) -> type:
    """Execute generated source as module `name` without touching storage."""
    cls = defined_class(name, registry)
    if cls is not None:
        return cls

    module = types.ModuleType(name)
    sys.modules[name] = module
    try:
        exec(compile(code, f"<{name}>", "exec"), module.__dict__)
    except BaseException:
        del sys.modules[name]
        raise

    logger.debug("Defined persistent collection %s in memory", name)
    return registry.register(name, getattr(module, name.rpartition(".")[2]))


def require(name: str, file_name: Path, registry: GeneratedTypeRegistry) -> type:
    """Import the generated module `name` from `file_name`."""
    cls = defined_class(name, registry)
    if cls is not None:
        return cls

    spec = importlib.util.spec_from_file_location(name, file_name)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load persistent collection {name} from {file_name}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        del sys.modules[name]
        raise

    logger.debug("Loaded persistent collection %s from %s", name, file_name)
    return registry.register(name, getattr(module, name.rpartition(".")[2]))


def generate_collection_class(
    target: type | str,
    fq_name: str,
    file_name: Path | None,
    registry: GeneratedTypeRegistry,
) -> GeneratedType:
    """Generate the class `fq_name` for `target`.

    Writes it to `file_name`, or defines it in memory when file_name is None.
    """
    namespace, _, class_name = fq_name.rpartition(".")
    target_type = introspect(resolve_target(target))

    logger.debug("Generating persistent collection %s for %s", fq_name, target_type.fqcn)
    code = render(target_type, class_name)

    if file_name is None:
        define(fq_name, code, registry)
        return GeneratedType(namespace=namespace, short_name=class_name, source=code)

    write_atomic(file_name, code)
    logger.info("Wrote persistent collection %s to %s", fq_name, file_name)
    return GeneratedType(namespace=namespace, short_name=class_name, source=code, path=file_name)


def file_name_for(directory: str | Path, class_name: str) -> Path:
    return Path(directory) / f"{class_name}{SOURCE_EXTENSION}"
