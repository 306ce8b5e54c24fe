"""统一身份模型与归一化"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# 平台未提供过期时间时 expires_in 的取值（int64 最大值）
EXPIRES_NEVER = 2**63 - 1


class TokenResponse(BaseModel):
    """access_token 接口响应基类，未建模字段保留在 model_extra 中"""

    model_config = ConfigDict(extra="allow")

    access_token: str = Field(min_length=1)
    refresh_token: str | None = None
    expires_in: int | None = None


class UserInfoResponse(BaseModel):
    """用户信息接口响应基类，未提升到统一身份的字段保留在 extra 中"""

    model_config = ConfigDict(extra="allow")

    @property
    def extra(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


@dataclass
class CanonicalIdentity:
    """第三方用户统一身份

    Attributes:
        user_id: 平台内稳定的用户标识（微信 unionid、QQ openid、GitHub id 等）
        name: 昵称/显示名
        access_token: 访问令牌
        refresh_token: 刷新令牌，平台未下发时为空字符串
        expires_in: 过期秒数，平台无过期概念时为 EXPIRES_NEVER
        extra: 原始用户信息中未被提升的字段
    """

    user_id: str
    name: str
    access_token: str
    refresh_token: str = ""
    expires_in: int = EXPIRES_NEVER
    extra: dict[str, Any] = field(default_factory=dict)


def build_identity(
    *,
    user_id: str | int,
    name: str | None,
    token: TokenResponse,
    extra: dict[str, Any] | None = None,
) -> CanonicalIdentity:
    return CanonicalIdentity(
        user_id=str(user_id),
        name=name or "",
        access_token=token.access_token,
        refresh_token=token.refresh_token or "",
        expires_in=token.expires_in if token.expires_in is not None else EXPIRES_NEVER,
        extra=dict(extra or {}),
    )
