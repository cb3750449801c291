from pydantic import BaseModel
from pydantic.alias_generators import to_camel


#Wire format is camelCase, attributes stay snake_case
class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }
