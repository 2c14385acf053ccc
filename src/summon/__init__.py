"""
Summon - scaffolding generators built from pure, lazily-interpreted Tasks.

Core Principle: generators describe WHAT to do as a Task; an interpreter
decides whether to do it (live) or only record it (dry run).

Example:
    >>> from summon import dry_run, file_writes, mkdir, sequence_, write_file
    >>> task = sequence_([mkdir("src"), write_file("src/index.ts", "export {};\\n")])
    >>> [w.path for w in file_writes(dry_run(task).effects)]
    ['src/index.ts']
"""

from __future__ import annotations

from summon.combinators import (
    attempt,
    bracket,
    ensure,
    fold,
    if_else,
    if_else_m,
    optional,
    or_else,
    parallel,
    parallel_n,
    race,
    retry,
    sequence,
    sequence_,
    tap,
    tap_error,
    traverse,
    traverse_,
    unless,
    when,
    when_m,
    zip_tasks,
)
from summon.context import TaskContext
from summon.dry_run import (
    DryRunInterpreter,
    DryRunResult,
    affected_files,
    collect_effects,
    count_effects,
    dry_run,
    dry_run_with,
    file_writes,
    filter_effects,
)
from summon.errors import TaskError, TaskExecutionError, task_error
from summon.generator import (
    GeneratorDefinition,
    GeneratorMeta,
    build_task,
    interpret,
    invoke_generator,
    resolve_answers,
)
from summon.interpreter import LiveInterpreter, PromptHandler, run_task
from summon.listeners import (
    CompositeListener,
    ExecutionListener,
    LoggingListener,
    NullListener,
    RecordingListener,
)
from summon.primitives import (
    append_file,
    copy_directory,
    copy_file,
    debug,
    delete_directory,
    delete_file,
    error,
    exec_,
    exec_simple,
    exists,
    get_context,
    glob,
    info,
    log,
    mkdir,
    noop,
    prompt,
    prompt_confirm,
    prompt_multiselect,
    prompt_select,
    prompt_text,
    read_file,
    set_context,
    succeed,
    warn,
    with_context,
    write_file,
)
from summon.result import Failure, Result, Success
from summon.task import (
    Task,
    TaskBuilder,
    bind,
    effect,
    fail,
    fail_with,
    map_error,
    map_task,
    pure,
    recover,
    task,
)
from summon.template import render_file, render_string, template, template_dir


__version__ = "0.1.0"

__all__ = [
    # Results
    "Result",
    "Success",
    "Failure",
    "TaskError",
    "TaskExecutionError",
    "task_error",
    # Task
    "Task",
    "TaskBuilder",
    "task",
    "pure",
    "effect",
    "fail",
    "fail_with",
    "bind",
    "map_task",
    "recover",
    "map_error",
    # Combinators
    "sequence",
    "sequence_",
    "traverse",
    "traverse_",
    "parallel",
    "parallel_n",
    "race",
    "when",
    "unless",
    "if_else",
    "when_m",
    "if_else_m",
    "retry",
    "or_else",
    "optional",
    "attempt",
    "fold",
    "bracket",
    "ensure",
    "tap",
    "tap_error",
    "zip_tasks",
    # Primitives
    "read_file",
    "write_file",
    "append_file",
    "mkdir",
    "copy_file",
    "copy_directory",
    "delete_file",
    "delete_directory",
    "exists",
    "glob",
    "exec_",
    "exec_simple",
    "prompt",
    "prompt_text",
    "prompt_confirm",
    "prompt_select",
    "prompt_multiselect",
    "log",
    "debug",
    "info",
    "warn",
    "error",
    "get_context",
    "set_context",
    "with_context",
    "noop",
    "succeed",
    # Templates
    "render_string",
    "render_file",
    "template",
    "template_dir",
    # Interpreters
    "LiveInterpreter",
    "PromptHandler",
    "run_task",
    "TaskContext",
    "DryRunInterpreter",
    "DryRunResult",
    "dry_run",
    "dry_run_with",
    "collect_effects",
    "count_effects",
    "filter_effects",
    "file_writes",
    "affected_files",
    # Listeners
    "ExecutionListener",
    "NullListener",
    "LoggingListener",
    "CompositeListener",
    "RecordingListener",
    # Generators
    "GeneratorMeta",
    "GeneratorDefinition",
    "resolve_answers",
    "build_task",
    "interpret",
    "invoke_generator",
]
