import os
import sys

# === App Version ===
APP_NAME = "CrackLeaf"
APP_VERSION = "0.3.0"

# === Window Geometry ===
WINDOW_WIDTH = 390
WINDOW_HEIGHT_BASE = 390
WINDOW_HEIGHT_STEP = 70
WINDOW_HEIGHT_MAX = int(WINDOW_HEIGHT_BASE * 2.5)
LIST_GROW_START = 3
LIST_MAX_FILES = 8

# === Colours ===
BG_COLOR = "#FCF5EA"
FG_COLOR = "#192F2A"
TOOLTIP_BG = "#ffffe0"

# === Animation ===
FRAME_INTERVAL_MS = 150
UI_POLL_MS = 30
PECK_LOOPS = 2
SUCCESS_LOOPS = 1

FRAME_SETS = {
    "logo": ["crackleaf"],
    "happy_loop": ["高兴1", "高兴2", "高兴3", "高兴4", "高兴3", "高兴2", "高兴1"],
    "peck": ["啄1", "啄2"],
    "success": ["成功1", "成功2", "成功3", "成功4", "成功5"],
    "success_reverse": ["成功5", "成功4", "成功3", "成功2", "成功1"],
}

# === Assets ===
ASSETS_DIR_NAME = "assets"
FONT_FILE = "Huiwenfangsong.ttf"
FONT_FAMILY = "Huiwenfangsong"
FONT_FALLBACKS = ["Songti SC", "SimSun", "Microsoft YaHei", "PingFang SC", "Noto Serif CJK SC"]
FONT_SIZE = 16
PLACEHOLDER_SIZE = (64, 64)

# === Icons & Status Labels ===
ICON_LOCKED = "🔒"
ICON_UNLOCKED = "🔓"

STATUS_RESTRICTED = "加密受限"
STATUS_UNRESTRICTED = "未受限"
STATUS_UNKNOWN = "未知"
STATUS_UNLOCKED = "解锁成功"
STATUS_UNLOCK_FAILED = "解锁失败"

# === Result / Hint Texts ===
TEXT_PROCESSING = "处理中..."
TEXT_ALL_SUCCESS = "解锁成功"
TEXT_PARTIAL_SUCCESS = "部分成功: {success}/{total}"
TEXT_ALL_FAILED = "解锁失败"
TEXT_HINT_EMPTY = "点击或者拖入文件"
TEXT_HINT_MULTI = "已导入 {count} 个文件"
TEXT_DROP_OVERLAY = "松开以导入"
TEXT_OPEN_BUTTON = "开"

# === qpdf ===
QPDF_FILENAME = "qpdf.exe" if sys.platform == "win32" else "qpdf"
CREATE_NO_WINDOW = 0x08000000
OUTPUT_SUFFIX = "_unlocked"
OUTPUT_MAX_INDEX = 9999

ENCRYPTED_MARKERS = ("file is encrypted", "encryption: yes", "user password", "owner password")
NOT_ENCRYPTED_MARKERS = ("file is not encrypted", "not encrypted")

QPDF_WARNING_UNRECOGNIZED = "已检测到 qpdf，但版本无法识别"
QPDF_ERROR_FAILED = "qpdf 运行失败（依赖缺失或版本不匹配）"
QPDF_ERROR_FAILED_DETAIL = "qpdf 运行失败：{stderr}"
QPDF_ERROR_UNAVAILABLE = "qpdf 不可用（请把 qpdf 放在程序同目录）：{error}"
QPDF_ERROR_SPAWN = "qpdf 执行失败（请把 qpdf 放在程序同目录或加入 PATH）: {error}"
UNLOCK_INFO_FAILED = "解锁失败: {error}"

QPDF_DIALOG_TITLE = "需要安装 qpdf"

# === Logging Settings ===
LOG_DIR = os.getenv("CRACKLEAF_LOG_DIR", os.path.join(os.path.expanduser("~"), ".crackleaf", "logs"))
LOG_FILE = "crackleaf.log"
LOG_LEVEL = "INFO"
DEBUG = os.getenv("CRACKLEAF_DEBUG", "0") == "1"
