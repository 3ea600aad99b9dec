# app/schemas/base.py
from pydantic import BaseModel, ConfigDict


def _to_camel(s: str) -> str:
    parts = s.split('_')
    return parts[0] + ''.join(p.title() for p in parts[1:])


class CamelSchema(BaseModel):
    """基础模式：接收 snake_case 或 camelCase，输出 camelCase"""
    model_config = ConfigDict(alias_generator=_to_camel, populate_by_name=True, from_attributes=True)


# 项目名只允许 GitHub 仓库名字符
PROJECT_NAME_PATTERN = r'^[a-zA-Z0-9._-]+$'
