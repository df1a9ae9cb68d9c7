from hashsweep.core.models import DuplicateHandlingMethod, SortOrder

ACTION_ALIASES = {
    "none": DuplicateHandlingMethod.NO_ACTION,
    "delete": DuplicateHandlingMethod.DELETE,
    "move": DuplicateHandlingMethod.MOVE,
}

ACTION_CHOICES = list(ACTION_ALIASES.keys())

ACTION_HELP_TEXT = (
    "What to do with duplicates (the first file of every group is always kept):\n"
    "  none   : Only report duplicate groups (default)\n"
    "  delete : Delete duplicates (add --trash to send them to the system trash)\n"
    "  move   : Move duplicates into the directory given by --move-to\n"
)

SORT_ALIASES = {
    "shortest-path": SortOrder.SHORTEST_PATH,
    "shortest-filename": SortOrder.SHORTEST_FILENAME,
    "lexical": SortOrder.LEXICAL,
    "insertion": SortOrder.INSERTION,
}

SORT_CHOICES = list(SORT_ALIASES.keys())

SORT_HELP_TEXT = (
    "Which file of a group is kept (sorted first):\n"
    "  shortest-path     : Files closer to the root first (default)\n"
    "  shortest-filename : Shorter file names first\n"
    "  lexical           : Alphabetical full path\n"
    "  insertion         : Scan order (depends on the filesystem)\n"
)

EPILOG_TEXT = """
Examples:
  Report duplicates in the Pictures folder and everything below it
  %(prog)s -d ~/Pictures -r

  Save all fingerprints to a CSV file
  %(prog)s -d ~/Pictures -r --output fingerprints.csv

  Preview what would be moved, without touching anything
  %(prog)s -d ~/Pictures -r --action move --move-to ~/dupes --dry-run

  Send duplicates to the trash without a confirmation prompt (for scripts)
  %(prog)s -d ~/Pictures -r --action delete --trash --force
"""
