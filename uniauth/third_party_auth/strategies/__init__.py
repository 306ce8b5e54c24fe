"""第三方认证策略实现模块"""

from .alipay import AlipayAuthStrategy
from .baidu import BaiduAuthStrategy
from .facebook import FacebookAuthStrategy
from .github import GitHubAuthStrategy
from .qq import QQAuthStrategy
from .twitter import TwitterAuthStrategy
from .wechat_open import WeChatOpenAuthStrategy
from .weibo import WeiboAuthStrategy

__all__ = [
    "AlipayAuthStrategy",
    "BaiduAuthStrategy",
    "FacebookAuthStrategy",
    "GitHubAuthStrategy",
    "QQAuthStrategy",
    "TwitterAuthStrategy",
    "WeChatOpenAuthStrategy",
    "WeiboAuthStrategy",
]
