"""Diff Studio core: git invocations (apply, config, diff)."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Union

from .extractor import SelectionPatchExtractor
from .models import ApplyResult


class GitCommandError(Exception):
    """git could not be launched or did not finish in time."""


class GitRunner:
    APPLY_ARGS = ["apply", "--3way", "--whitespace=nowarn"]

    def __init__(self, repo_root: Union[str, Path], git: str = "git", timeout: int = 30):
        self.repo_root = Path(repo_root)
        self.git = git
        self.timeout = timeout

    def _run_git_command(self, args: List[str], stdin: Optional[bytes] = None) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                [self.git] + args,
                cwd=self.repo_root,
                input=stdin,
                capture_output=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise GitCommandError(f"git {' '.join(args)} failed: {e}") from e

    def apply_patch(self, patch: bytes, encoding: str = "utf-8") -> str:
        """Empty output means the patch applied cleanly."""
        result = self._run_git_command(self.APPLY_ARGS, stdin=patch)
        if result.returncode == 0:
            # --3way reports "Applied patch to '...' cleanly." on success
            return ""
        output = (result.stdout + result.stderr).decode(encoding, errors="replace").strip()
        return output or f"git apply exited with status {result.returncode}"

    def config_value(self, key: str) -> Optional[str]:
        result = self._run_git_command(["config", "--get", key])
        if result.returncode != 0:
            return None
        return result.stdout.decode("utf-8", errors="replace").strip() or None

    def autocrlf(self) -> str:
        return (self.config_value("core.autocrlf") or "false").lower()

    def diff(self, path: Optional[str] = None, cached: bool = False, encoding: str = "utf-8") -> str:
        args = ["diff", "--no-color", "--no-ext-diff"]
        if cached:
            args.append("--cached")
        if path:
            args += ["--", path]
        result = self._run_git_command(args)
        if result.returncode != 0:
            raise GitCommandError(result.stderr.decode(encoding, errors="replace").strip())
        return result.stdout.decode(encoding, errors="replace")


class SelectionApplier:
    """
    Applies selected diff lines to the working tree:
      - forward: cherry-pick the shown change
      - reverse: revert the shown change (reset worktree lines)
    """

    def __init__(self, runner: GitRunner, extractor: Optional[SelectionPatchExtractor] = None):
        self.runner = runner
        self.extractor = extractor or SelectionPatchExtractor()

    def apply_selected_lines(
        self,
        text: str,
        start: int,
        length: int,
        reverse: bool,
        encoding: str = "utf-8",
        conflict_handler: Optional[Callable[[], bool]] = None,
    ) -> ApplyResult:
        res = ApplyResult(success=False, overall_message="Apply failed.")
        mode = "revert" if reverse else "cherry-pick"

        patch = self.extractor.extract_patch(text, start, length, reverse, encoding)
        res.patch = patch
        if not patch:
            res.success = True
            res.overall_message = "No changed lines selected."
            res.summary["applied"] = False
            res.add_log("INFO", "Selection produced an empty patch; nothing applied.", mode=mode, start=start, length=length)
            return res

        res.add_log("INFO", "Applying selected lines.", mode=mode, patch_bytes=len(patch))
        output = self.runner.apply_patch(patch, encoding)
        res.output = output

        if not output:
            res.success = True
            res.overall_message = "Selected lines applied."
            res.summary["applied"] = True
            res.add_log("INFO", "git apply succeeded.", mode=mode)
            return res

        res.summary["applied"] = False
        if conflict_handler is not None and conflict_handler():
            res.success = True
            res.overall_message = "Merge conflicts resolved."
            res.add_log("WARN", "git apply reported conflicts; resolved by handler.", mode=mode, output=output)
            return res

        res.overall_message = "git apply rejected the patch."
        res.add_log("ERROR", "git apply reported conflicts.", mode=mode, output=output)
        return res

    def cherry_pick_all_changes(self, text: str, encoding: str = "utf-8",
                                conflict_handler: Optional[Callable[[], bool]] = None) -> ApplyResult:
        if not text:
            res = ApplyResult(success=True, overall_message="Nothing to apply.")
            res.add_log("INFO", "Empty view; nothing applied.")
            return res
        return self.apply_selected_lines(text, 0, len(text), reverse=False,
                                         encoding=encoding, conflict_handler=conflict_handler)
