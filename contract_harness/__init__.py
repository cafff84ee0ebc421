from .contract import ContractContext, HarnessConfig

__all__ = ["ContractContext", "HarnessConfig"]
