"""Field rules for submitted forms.

Each form is a pydantic model whose fields carry their own rule lists
(``Annotated[str, min_length(3, "...")]``). Pydantic checks every field and
collects every failure; ``validate`` flattens those failures into a
``{field: [messages]}`` report so handlers can return it as data.
"""
from collections.abc import Mapping
from typing import Annotated, Any, TypeVar, get_args, get_origin

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

FieldErrors = dict[str, list[str]]
FORM_ERROR_KEY = "form"

M = TypeVar("M", bound=BaseModel)


class FormModel(BaseModel):
    """Snake_case attributes, camelCase on the wire and in stored documents."""

    # NaN and infinity are not numbers a form can submit.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)

    def to_document(self, **extra) -> dict:
        return {**self.model_dump(by_alias=True, exclude_none=True), **extra}


def _fail(message: str):
    raise PydanticCustomError("rule_failed", message)


def min_length(n: int, message: str) -> AfterValidator:
    def check(value: str) -> str:
        if len(value) < n:
            _fail(message)
        return value
    return AfterValidator(check)


def max_length(n: int, message: str) -> AfterValidator:
    def check(value: str) -> str:
        if len(value) > n:
            _fail(message)
        return value
    return AfterValidator(check)


def exact_length(n: int, message: str) -> AfterValidator:
    def check(value: str) -> str:
        if len(value) != n:
            _fail(message)
        return value
    return AfterValidator(check)


def not_blank(message: str) -> AfterValidator:
    def check(value: str) -> str:
        if not value.strip():
            _fail(message)
        return value
    return AfterValidator(check)


def ends_with(suffix: str, message: str) -> AfterValidator:
    def check(value: str) -> str:
        if not value.endswith(suffix):
            _fail(message)
        return value
    return AfterValidator(check)


def at_least(bound: float, message: str) -> AfterValidator:
    def check(value):
        if value is not None and value < bound:
            _fail(message)
        return value
    return AfterValidator(check)


def greater_than(bound: float, message: str) -> AfterValidator:
    def check(value):
        if value is not None and value <= bound:
            _fail(message)
        return value
    return AfterValidator(check)


def email_address(message: str) -> AfterValidator:
    def check(value: str) -> str:
        try:
            validate_email(value)
        except PydanticCustomError:
            _fail(message)
        return value
    return AfterValidator(check)


def must_be_true(message: str) -> AfterValidator:
    def check(value: bool) -> bool:
        if value is not True:
            _fail(message)
        return value
    return AfterValidator(check)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Optional numeric form inputs: "" means not supplied, "12" parses, "abc" fails.
OptionalNumber = Annotated[float | None, BeforeValidator(_blank_to_none)]
OptionalText = Annotated[str | None, BeforeValidator(_blank_to_none)]


def _nested_model(annotation: Any) -> type[BaseModel] | None:
    for candidate in (annotation, *get_args(annotation)):
        if get_origin(candidate) is None and isinstance(candidate, type) and issubclass(candidate, BaseModel):
            return candidate
    return None


def _error_key(model: type[BaseModel], loc: tuple) -> str:
    """Dotted wire path for an error location.

    Fields validated from their default report the attribute name rather
    than the alias, so every named part is mapped back to its alias.
    """
    parts = []
    current: type[BaseModel] | None = model
    for part in loc:
        if isinstance(part, str) and current is not None:
            field = current.model_fields.get(part) or next(
                (f for f in current.model_fields.values() if f.alias == part), None
            )
            if field is not None:
                parts.append(field.alias or part)
                current = _nested_model(field.annotation)
                continue
        parts.append(str(part))
    return ".".join(parts) or FORM_ERROR_KEY


def flatten_errors(model: type[BaseModel], exc: ValidationError) -> FieldErrors:
    errors: FieldErrors = {}
    for err in exc.errors():
        errors.setdefault(_error_key(model, err["loc"]), []).append(err["msg"])
    return errors


def validate(model: type[M], raw: Mapping[str, Any]) -> tuple[M | None, FieldErrors]:
    try:
        return model.model_validate(dict(raw)), {}
    except ValidationError as exc:
        return None, flatten_errors(model, exc)
