from dataclasses import dataclass


@dataclass
class IsolateConfig:
    """
    Configuration for block isolation. This should be passed around explicitly.
    """
    # Which extractors run, and in what order. Code blocks go first by default
    # so pipes inside code are never read as tables.
    extract_code_blocks: bool = True
    extract_tables: bool = True
    code_blocks_first: bool = True

    # Compare our counts with markdown-it-py's CommonMark parse
    cross_check_commonmark: bool = True

    # Report persistence (logs/<run_id>.json)
    save_report: bool = False
    log_dir: str = "logs"

    def as_dict(self):
        return self.__dict__
