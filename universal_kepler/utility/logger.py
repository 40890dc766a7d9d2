"""
Run Logger
==========

Duplicates the console output of a command-line run into a log file.
"""
import sys

from pathlib import Path
from typing  import Optional, TextIO


class TeeStream:
  """
  A stream that writes to a console stream and a shared log file.
  """
  def __init__(
    self,
    console  : TextIO,
    log_file : TextIO,
  ):
    self.console  = console
    self.log_file = log_file

  def write(self, message: str) -> int:
    self.console.write(message)
    self.log_file.write(message)
    self.log_file.flush()
    return len(message)

  def flush(self):
    self.console.flush()
    self.log_file.flush()

  def isatty(self) -> bool:
    return False


class LoggerContext:
  """
  Logger state needed to restore the console streams.
  """
  def __init__(
    self,
    log_file        : TextIO,
    original_stdout : TextIO,
    original_stderr : TextIO,
  ):
    self.log_file        = log_file
    self.original_stdout = original_stdout
    self.original_stderr = original_stderr


def start_logging(
  log_filepath : Path,
) -> LoggerContext:
  """
  Start copying stdout and stderr to a log file.

  Input:
  ------
    log_filepath : Path
      Path to the log file. Missing parent folders are created.

  Output:
  -------
    context : LoggerContext
      Context for stop_logging.
  """
  log_filepath = Path(log_filepath)
  log_filepath.parent.mkdir(parents=True, exist_ok=True)

  # Both streams share one handle so their lines interleave in order
  log_file = open(log_filepath, 'w')
  context  = LoggerContext(log_file, sys.stdout, sys.stderr)

  sys.stdout = TeeStream(context.original_stdout, log_file)
  sys.stderr = TeeStream(context.original_stderr, log_file)

  return context


def stop_logging(
  context : Optional[LoggerContext],
) -> None:
  """
  Restore stdout and stderr and close the log file.
  """
  if context is None:
    return

  sys.stdout = context.original_stdout
  sys.stderr = context.original_stderr

  context.log_file.close()
