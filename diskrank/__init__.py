from .models import OrderedReport, ReportEntry, SizeResult, compare_results
from .report import ResultCollector, collect
from .scanner import SizeAggregator, aggregate, scan_paths
from .utils import format_size, human_size

__version__ = "0.1.0"
