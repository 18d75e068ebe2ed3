from .lambda_completion import LambdaCompletion
from .subprocess_launcher import SubprocessChild, SubprocessLauncher

__all__ = [
    "LambdaCompletion",
    "SubprocessChild",
    "SubprocessLauncher",
]
