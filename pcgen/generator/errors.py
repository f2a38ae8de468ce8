"""Exceptions raised while generating persistent collection classes."""


class IntrospectionError(RuntimeError):
    """Raised when the shape of a target class cannot be introspected."""


class PersistentCollectionError(RuntimeError):
    """Base class for persistent collection generation failures."""


class DirectoryRequiredError(PersistentCollectionError):
    def __init__(self) -> None:
        super().__init__(
            "You must configure a persistent collection directory. See docs for details."
        )


class NamespaceRequiredError(PersistentCollectionError):
    def __init__(self) -> None:
        super().__init__(
            "You must configure a persistent collection namespace. See docs for details."
        )


class DirectoryNotWritableError(PersistentCollectionError):
    def __init__(self, directory: str = "") -> None:
        super().__init__(f"Your persistent collection directory must be writable: {directory}")
        self.directory = directory


class ParentClassRequiredError(PersistentCollectionError):
    def __init__(self, class_name: str, method_name: str) -> None:
        super().__init__(
            f'The method "{method_name}" in class "{class_name}" defines a parent type, '
            "but the class does not extend any class."
        )
        self.class_name = class_name
        self.method_name = method_name


class InvalidParameterTypeHintError(PersistentCollectionError):
    def __init__(self, class_name: str, method_name: str, parameter_name: str) -> None:
        super().__init__(
            f'The type hint of parameter "{parameter_name}" in method "{method_name}" '
            f'in class "{class_name}" is invalid.'
        )
        self.class_name = class_name
        self.method_name = method_name
        self.parameter_name = parameter_name


class InvalidReturnTypeHintError(PersistentCollectionError):
    def __init__(self, class_name: str, method_name: str) -> None:
        super().__init__(
            f'The return type of method "{method_name}" in class "{class_name}" is invalid.'
        )
        self.class_name = class_name
        self.method_name = method_name
