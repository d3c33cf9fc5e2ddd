from .models import Selection, NavigationTarget, DiffLine, DiffHunk, FileSection, ApplyResult
from .classifier import LineClassifier
from .hexdump import HexDumpFormatter
from .lineendings import LineEndingNormalizer
from .navigator import ChangeNavigator
from .patchbuilder import PatchBuilder
from .extractor import SelectionPatchExtractor
from .copyfilter import CopyFilter
from .git import GitRunner, GitCommandError, SelectionApplier
from .selftests import DiffStudioSelfTests

__all__ = [
    "Selection","NavigationTarget","DiffLine","DiffHunk","FileSection","ApplyResult",
    "LineClassifier","HexDumpFormatter","LineEndingNormalizer","ChangeNavigator",
    "PatchBuilder","SelectionPatchExtractor","CopyFilter",
    "GitRunner","GitCommandError","SelectionApplier","DiffStudioSelfTests",
]
