from __future__ import annotations

import string
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Tuple

from .language import ARABIC, ENGLISH, FRANCO, LANGUAGES

# ---------- Number rendering ----------
def round_half_up(value: float, places: int = 0) -> Decimal:
    q = Decimal(1).scaleb(-places)
    return Decimal(repr(float(value))).quantize(q, rounding=ROUND_HALF_UP)


def fmt_int(value: float) -> str:
    return str(round_half_up(value))


def fmt_pct(value: float) -> str:
    return str(round_half_up(value, 1))


def fmt_thousands(value: float) -> str:
    return f"{round_half_up(float(value) / 1000)}K"


class _ResponseFormatter(string.Formatter):
    """
    Adds three format specs to str.format:
      {x:money} full integer, except Franco which shows thousands with a K suffix
      {x:int}   rounded integer in every language
      {x:pct}   one decimal place
    """

    def __init__(self, language: str):
        super().__init__()
        self.language = language

    def format_field(self, value, format_spec):
        if format_spec == "money":
            return fmt_thousands(value) if self.language == FRANCO else fmt_int(value)
        if format_spec == "int":
            return fmt_int(value)
        if format_spec == "pct":
            return fmt_pct(value)
        return super().format_field(value, format_spec)


# ---------- Template table: (intent, language) -> text ----------
TEMPLATES: Dict[Tuple[str, str], str] = {
    ("greeting", ARABIC): "مرحباً! أنا مساعدك الذكي للمبيعات. اسألني عن أي شيء تريد معرفته عن المبيعات، الطلبات، أو الأفرع.",
    ("greeting", FRANCO): "Ahlan! Ana mosa3dak el zaky lel sales. Es2alni 3an ay 7aga 3aez t3rafha 3an el sales, orders, aw el branches.",
    ("greeting", ENGLISH): "Hello! I'm your smart sales assistant. Ask me anything about sales, orders, or branches.",

    ("highest_sales", ARABIC): "أعلى فرع في المبيعات: {name} بمبيعات {sales:money} جنيه",
    ("highest_sales", FRANCO): "A3la branch fel sales: {name} be {sales:money} geneih",
    ("highest_sales", ENGLISH): "Highest sales branch: {name} with {sales:money} EGP",

    ("lowest_sales", ARABIC): "أقل فرع في المبيعات: {name} بمبيعات {sales:money} جنيه",
    ("lowest_sales", FRANCO): "A2al branch fel sales: {name} be {sales:money} geneih",
    ("lowest_sales", ENGLISH): "Lowest sales branch: {name} with {sales:money} EGP",

    ("most_orders", ARABIC): "أكثر فرع عامل أوردرات: {name} بـ {orders} طلب",
    ("most_orders", FRANCO): "Aktar branch 3amel orders: {name} be {orders} order",
    ("most_orders", ENGLISH): "Most orders branch: {name} with {orders} orders",

    ("least_orders", ARABIC): "أقل فرع عامل أوردرات: {name} بـ {orders} طلب",
    ("least_orders", FRANCO): "A2al branch 3amel orders: {name} be {orders} order",
    ("least_orders", ENGLISH): "Least orders branch: {name} with {orders} orders",

    ("target_gap", ARABIC): (
        "لتحقيق الهدف محتاج:\n- {remaining:money} جنيه\n- حوالي {orders_needed} طلب إضافي\n"
        "(بناءً على متوسط قيمة الطلب {avg:int} جنيه)"
    ),
    ("target_gap", FRANCO): (
        "3ashan t7a2a2 el target me7tag:\n- {remaining:money} geneih\n- 7awaly {orders_needed} order ziada\n"
        "(based 3ala avg order {avg:int} geneih)"
    ),
    ("target_gap", ENGLISH): (
        "To achieve target you need:\n- {remaining:money} EGP\n- About {orders_needed} more orders\n"
        "(Based on avg order value of {avg:int} EGP)"
    ),

    ("total_sales", ARABIC): "إجمالي المبيعات: {sales:money} جنيه مصري",
    ("total_sales", FRANCO): "Egmaly el sales: {sales:money} geneih masry",
    ("total_sales", ENGLISH): "Total Sales: {sales:money} EGP",

    ("total_orders", ARABIC): "إجمالي الطلبات: {orders} طلب",
    ("total_orders", FRANCO): "Egmaly el orders: {orders} order",
    ("total_orders", ENGLISH): "Total Orders: {orders}",

    ("best_branch", ARABIC): "أفضل فرع: {name} بمبيعات {sales:money} جنيه ({progress:pct}٪ من الهدف)",
    ("best_branch", FRANCO): "A7san branch: {name} be sales {sales:money} geneih ({progress:pct}% men el target)",
    ("best_branch", ENGLISH): "Best Branch: {name} with {sales:money} EGP sales ({progress:pct}% of target)",

    ("range_branch", ARABIC): "{name} من يوم {start} ليوم {end}:\n- المبيعات: {sales:money} جنيه\n- الأوردرات: {orders} طلب",
    ("range_branch", FRANCO): "{name} men yom {start} le yom {end}:\n- El sales: {sales:money} geneih\n- El orders: {orders} order",
    ("range_branch", ENGLISH): "{name} from day {start} to {end}:\n- Sales: {sales:money} EGP\n- Orders: {orders}",

    ("range_total", ARABIC): "إجمالي من يوم {start} ليوم {end}:\n- المبيعات: {sales:money} جنيه\n- الأوردرات: {orders} طلب",
    ("range_total", FRANCO): "Egmaly men yom {start} le yom {end}:\n- El sales: {sales:money} geneih\n- El orders: {orders} order",
    ("range_total", ENGLISH): "Total from day {start} to {end}:\n- Sales: {sales:money} EGP\n- Orders: {orders}",

    ("day_branch", ARABIC): "{name} يوم {date}:\n- المبيعات: {sales:money} جنيه\n- الأوردرات: {orders} طلب",
    ("day_branch", FRANCO): "{name} yom {date}:\n- El sales: {sales:money} geneih\n- El orders: {orders} order",
    ("day_branch", ENGLISH): "{name} on {date}:\n- Sales: {sales:money} EGP\n- Orders: {orders}",

    ("day_total", ARABIC): "إجمالي يوم {date}:\n- المبيعات: {sales:money} جنيه\n- الأوردرات: {orders} طلب",
    ("day_total", FRANCO): "Egmaly yom {date}:\n- El sales: {sales:money} geneih\n- El orders: {orders} order",
    ("day_total", ENGLISH): "Total for {date}:\n- Sales: {sales:money} EGP\n- Orders: {orders}",

    ("branch_orders", ARABIC): "{name} عامل {orders} أوردر لحد دلوقتي",
    ("branch_orders", FRANCO): "{name} 3amel {orders} order le7ad delwa2ty",
    ("branch_orders", ENGLISH): "{name} has made {orders} orders so far",

    ("branch_detail", ARABIC): (
        "{name}:\n- المبيعات: {sales:money} جنيه\n- الأوردرات: {orders} طلب\n"
        "- الهدف: {target:money} جنيه\n- التقدم: {progress:pct}٪"
    ),
    ("branch_detail", FRANCO): (
        "{name}:\n- El sales: {sales:money} geneih\n- El orders: {orders} order\n"
        "- El target: {target:money} geneih\n- Progress: {progress:pct}%"
    ),
    ("branch_detail", ENGLISH): (
        "{name}:\n- Sales: {sales:money} EGP\n- Orders: {orders}\n"
        "- Target: {target:money} EGP\n- Progress: {progress:pct}%"
    ),

    ("avg_order_value", ARABIC): "متوسط قيمة الطلب: {avg:int} جنيه",
    ("avg_order_value", FRANCO): "Motwast el order: {avg:int} geneih",
    ("avg_order_value", ENGLISH): "Average Order Value: {avg:int} EGP",

    ("default", ARABIC): "يمكنني مساعدتك في معرفة:\n- المبيعات والطلبات\n- أفضل وأقل الأفرع\n- ما تحتاجه لتحقيق الأهداف\nاسأل عن أي شيء!",
    ("default", FRANCO): "Momken asa3dak fe ma3refet:\n- El sales wel orders\n- A7san we a2al branches\n- Elly me7tag 3ashan t7a2a2 el target\nEs2al 3an ay 7aga!",
    ("default", ENGLISH): "I can help you with:\n- Sales and orders\n- Best and worst performing branches\n- What's needed to achieve targets\nAsk me anything!",
}

INTENTS = sorted({intent for intent, _ in TEMPLATES})


def missing_templates() -> List[Tuple[str, str]]:
    """Every intent must carry all three language variants; returns the gaps."""
    return [(i, lang) for i in INTENTS for lang in LANGUAGES if (i, lang) not in TEMPLATES]


def render(intent: str, language: str, **values) -> str:
    template = TEMPLATES[(intent, language)]
    return _ResponseFormatter(language).format(template, **values)
