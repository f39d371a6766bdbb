from dupefindr.core.models import ActionKind, KeepPolicy, HASH_ALGORITHMS

ACTION_ALIASES = {
    "find": ActionKind.FIND,
    "move": ActionKind.MOVE,
    "copy": ActionKind.COPY,
    "delete": ActionKind.DELETE,
}

ACTION_CHOICES = list(ACTION_ALIASES.keys())

ACTION_HELP_TEXT = (
    "What to do with duplicates (the keeper of each group is never touched):\n"
    "  find   : only list duplicate groups\n"
    "  move   : move duplicates into --location\n"
    "  copy   : copy duplicates into --location\n"
    "  delete : move duplicates to the system trash\n"
)

KEEP_ALIASES = {policy.value: policy for policy in KeepPolicy}

KEEP_CHOICES = list(KEEP_ALIASES.keys())

KEEP_HELP_TEXT = (
    "Which file of each group is kept:\n"
    "  first         : first file found (name order, depth-first)\n"
    "  newest        : most recently modified\n"
    "  oldest        : least recently modified\n"
    "  shortest-path : shortest full path\n"
    "Ties always fall back to 'first'. Default: first"
)

ALGORITHM_CHOICES = list(HASH_ALGORITHMS)

ALGORITHM_HELP_TEXT = (
    "Content hash algorithm:\n"
    "  xxh64  : xxHash64, fastest (default)\n"
    "  xxh128 : xxHash3 128-bit\n"
    "  md5    : MD5"
)

EPILOG_TEXT = """
Examples:
  List duplicates directly inside Downloads
  %(prog)s find --path ~/Downloads

  Walk the whole tree, only .jpg files, ignore thumbnails
  %(prog)s find --path ~/Pictures -r --wildcard '*.jpg' --exclusion-wildcard 'thumb_*'

  Show what delete would do, and keep an audit trail
  %(prog)s delete --path ~/Pictures -r --dry-run --csv-file report.csv

  Move duplicates aside without a confirmation prompt (for scripts)
  %(prog)s move --path ~/Pictures -r --location ~/dupes --force

  Pick the file to keep in every group yourself
  %(prog)s delete --path ~/Pictures -r --interactive
"""
