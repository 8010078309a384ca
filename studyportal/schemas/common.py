from pydantic import BaseModel, ConfigDict, model_validator


class RequestBody(BaseModel):
    """Base for JSON request bodies.

    Empty-string values are dropped before validation, so ``""`` behaves
    exactly like an omitted key. Defaults are validated too, which lets a
    missing required field report its own "... is required" message.
    Missing aliased fields are filled in under their alias so that error
    locations always use the JSON key the client sends.
    """

    model_config = ConfigDict(populate_by_name=True, validate_default=True)

    @model_validator(mode="before")
    @classmethod
    def drop_empty_strings(cls, data):
        if not isinstance(data, dict):
            return data
        cleaned = {key: value for key, value in data.items() if value != ""}
        for name, field in cls.model_fields.items():
            if field.alias and field.alias not in cleaned and name not in cleaned:
                cleaned[field.alias] = None
        return cleaned


class MessageResponse(BaseModel):
    message: str
