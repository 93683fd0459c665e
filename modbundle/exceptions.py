"""
ModBundle 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息和 JSON 序列化。
"""

from typing import Any, Dict, Optional


class ModBundleError(Exception):
    """ModBundle 基础异常类"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._get_default_code()
        self.context = context or {}

    def _get_default_code(self) -> str:
        """获取默认错误代码"""
        return "E000"

    def to_dict(self) -> Dict[str, Any]:
        """将异常转换为字典格式"""
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ManifestError(ModBundleError):
    """模组清单相关错误"""

    def _get_default_code(self) -> str:
        return "E100"


class ConfigParseError(ManifestError):
    """清单解析错误"""

    def _get_default_code(self) -> str:
        return "E101"


class ConfigValidationError(ManifestError):
    """清单条目验证错误"""

    def _get_default_code(self) -> str:
        return "E102"


class DownloadError(ModBundleError):
    """下载相关错误"""

    def _get_default_code(self) -> str:
        return "E300"


class DownloadNetworkError(DownloadError):
    """下载网络错误"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        status: Optional[int] = None,
    ):
        super().__init__(message, code, context)
        self.status = status
        if status is not None:
            self.context["status"] = status

    def _get_default_code(self) -> str:
        return "E301"


class DownloadFileError(DownloadError):
    """下载文件操作错误"""

    def _get_default_code(self) -> str:
        return "E303"


class AssetNotFoundError(DownloadError):
    """无法解析下载地址"""

    def _get_default_code(self) -> str:
        return "E304"


class PackagingError(ModBundleError):
    """打包相关错误"""

    def _get_default_code(self) -> str:
        return "E400"


class ExtractionError(ModBundleError):
    """解压相关错误"""

    def _get_default_code(self) -> str:
        return "E500"


class RelocationError(ModBundleError):
    """文件移动相关错误"""

    def _get_default_code(self) -> str:
        return "E600"


__all__ = [
    # 基础异常
    "ModBundleError",
    # 清单异常
    "ManifestError",
    "ConfigParseError",
    "ConfigValidationError",
    # 下载异常
    "DownloadError",
    "DownloadNetworkError",
    "DownloadFileError",
    "AssetNotFoundError",
    # 处理异常
    "ExtractionError",
    "RelocationError",
    # 打包异常
    "PackagingError",
]
