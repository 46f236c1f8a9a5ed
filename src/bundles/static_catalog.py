"""Built-in bundle templates shipped with the service."""

from audience.profile import StyleLevel
from bundles.template import BundleIcon, BundleTemplate

FAMILY_RHYTHM = BundleTemplate(
    id="family-rhythm",
    name="Family Rhythm",
    category="Family",
    description="Shared daily anchors for busy households and homeschool days.",
    formats=("svg", "printable", "vinyl", "digital"),
    persona_tags=("family", "homeschool", "solo mom", "partner"),
    keywords=("morning basket", "play", "chores", "family meeting", "homeschool", "read aloud"),
    icon_size=1.0,
    icons=(
        BundleIcon(
            slug="morning-basket",
            label="Morning Basket",
            description="Gather the day's books, songs and play materials in one basket. Start together.",
            tags=("morning", "homeschool"),
            tone="bright",
            section="Morning",
        ),
        BundleIcon(
            slug="family-meeting",
            label="Family Meeting",
            description="A short weekly check-in where everyone shares one win and one wish.",
            tags=("family", "weekly"),
            section="Weekly",
        ),
        BundleIcon(
            slug="tidy-together",
            label="Tidy Together",
            description="Ten minutes of music and shared tidying before dinner.",
            tags=("chores",),
            section="Evening",
        ),
        BundleIcon(
            slug="outdoor-play",
            label="Outdoor Play",
            description="Fresh air and free play after lessons.",
            tags=("play",),
            tone="bright",
            section="Afternoon",
        ),
        BundleIcon(
            slug="quiet-reading",
            label="Quiet Reading",
            description="Everyone settles in with a book.",
            tags=("rest",),
            tone="soft",
            section="Afternoon",
        ),
        BundleIcon(
            slug="nap-nest",
            label="Nap Nest",
            description="A calm corner for little ones to rest.",
            tags=("rest", "toddler"),
            tone="soft",
            section="Afternoon",
            ages=("child",),
            templates={"child_name": "{value}'s Nap Nest"},
        ),
    ),
)

SOLO_PARENT_RESET = BundleTemplate(
    id="solo-parent-reset",
    name="Solo Parent Reset",
    category="Household",
    description="Low-effort anchors for one adult carrying the whole household.",
    formats=("svg", "printable", "cling", "digital"),
    persona_tags=("solo mom", "household"),
    keywords=("laundry", "meal prep", "reset", "bedtime"),
    icon_size=0.95,
    icons=(
        BundleIcon(slug="laundry-loop", label="Laundry Loop", description="One load started, one load folded.", tags=("laundry",)),
        BundleIcon(slug="meal-prep", label="Meal Prep", description="Batch one base for the next three dinners.", tags=("meal prep",)),
        BundleIcon(slug="reset-hour", label="Reset Hour", description="Clear one surface and plan tomorrow.", tags=("reset",)),
        BundleIcon(slug="bedtime-glide", label="Bedtime Glide", description="Bath, book, bed.", tags=("bedtime",), tone="soft"),
    ),
)

WELLNESS_REGULATION = BundleTemplate(
    id="wellness-regulation",
    name="Regulation Toolkit",
    category="Wellness",
    description="Sensory-friendly cues for regulation, transitions and rest.",
    formats=("svg", "printable", "digital"),
    persona_tags=("wellness", "sensory", "adhd support", "neurodivergent child"),
    keywords=("regulation", "transitions", "calm down", "movement break"),
    style_level=StyleLevel.NEURODIVERGENT_SUPPORT,
    icon_size=1.1,
    icons=(
        BundleIcon(slug="calm-corner", label="Calm Corner", description="Go to the calm corner and take five slow breaths.", tags=("regulation",), tone="soft", section="Regulation"),
        BundleIcon(slug="movement-break", label="Movement Break", description="Jump, stretch or push the wall for one minute.", tags=("movement break",), tone="bright", section="Regulation"),
        BundleIcon(slug="transition-timer", label="Transition Timer", description="Five minutes until the next thing. The timer will tell you.", tags=("transitions",), section="Transitions"),
        BundleIcon(slug="heavy-work", label="Heavy Work", description="Carry the laundry basket or the books.", tags=("sensory",), section="Regulation"),
        BundleIcon(slug="quiet-headphones", label="Quiet Headphones", description="Headphones on when it gets loud.", tags=("sensory",), tone="soft", section="Regulation"),
    ),
)

KIDS_ROUTINE = BundleTemplate(
    id="kids-routine",
    name="Little Helpers Routine",
    category="Kids",
    description="Big, friendly picture cues for young children.",
    formats=("svg", "printable", "vinyl", "digital"),
    persona_tags=("toddler",),
    keywords=("brush teeth", "get dressed", "toys away", "bath"),
    style_level=StyleLevel.KID_FRIENDLY,
    icon_size=1.25,
    icons=(
        BundleIcon(slug="brush-teeth", label="Brush Teeth", description="Top teeth, bottom teeth, spit.", tags=("hygiene",), ages=("child",)),
        BundleIcon(slug="get-dressed", label="Get Dressed", description="Shirt, pants, socks, shoes.", tags=("morning",), ages=("child",)),
        BundleIcon(slug="toys-away", label="Toys Away", description="Every toy goes home to its bin.", tags=("chores",), ages=("child",)),
        BundleIcon(slug="bath-time", label="Bath Time", description="Splash, wash, towel.", tags=("evening",), ages=("child",)),
        BundleIcon(slug="homework-hub", label="Homework Hub", description="Sit at the desk and finish one page.", tags=("school",), ages=("child", "teen")),
    ),
)

ELDER_CARE = BundleTemplate(
    id="elder-care",
    name="Steady Days",
    category="Elder Care",
    description="Large, high-contrast reminders for medication, meals and visits.",
    formats=("printable", "svg", "digital"),
    persona_tags=("elder support",),
    keywords=("medication", "hydration", "visits", "appointments"),
    style_level=StyleLevel.ELDER_ACCESSIBLE,
    icon_size=1.25,
    icons=(
        BundleIcon(slug="morning-meds", label="Morning Medication", description="Take the morning pills with a full glass of water.", tags=("medication",), ages=("adult", "elder")),
        BundleIcon(slug="drink-water", label="Drink Water", description="One glass now.", tags=("hydration",)),
        BundleIcon(slug="family-visit", label="Family Visit", description="Someone is coming to see you today.", tags=("visits",), templates={"family_name": "{value} Visit"}),
        BundleIcon(slug="appointment-day", label="Appointment Day", description="Bring your card and your list of questions.", tags=("appointments",)),
    ),
)

COMPLETE_ALL_IN_ONE = BundleTemplate(
    id="complete-all-in-one",
    name="Complete Rhythm Library",
    category="Complete All-in-One",
    description="Every anchor for daily, weekly and seasonal rhythm in one bundle.",
    formats=("svg", "svg-sheet", "printable", "vinyl", "cling", "digital"),
    persona_tags=("premium", "full"),
    keywords=("seasonal", "rituals", "moon", "planning"),
    icon_size=0.95,
    icons=(
        BundleIcon(slug="sunrise-ritual", label="Sunrise Ritual", description="Light, water, intention.", tags=("morning", "rituals"), section="Daily"),
        BundleIcon(slug="focus-block", label="Focus Block", description="Ninety minutes on the one thing that matters.", tags=("planning",), section="Daily"),
        BundleIcon(slug="weekly-planning", label="Weekly Planning", description="Review the week and set three priorities.", tags=("planning",), section="Weekly"),
        BundleIcon(slug="moon-reflection", label="Moon Reflection", description="Journal under the new and full moon.", tags=("moon", "rituals"), section="Monthly"),
        BundleIcon(slug="seasonal-reset", label="Seasonal Reset", description="Rotate wardrobes and refresh goals.", tags=("seasonal",), section="Seasonal"),
        BundleIcon(slug="household-circle", label="Household Circle", description="Gather everyone to share plans for the season.", tags=("family",), section="Seasonal"),
    ),
)

STATIC_CATALOG: tuple[BundleTemplate, ...] = (
    FAMILY_RHYTHM,
    SOLO_PARENT_RESET,
    WELLNESS_REGULATION,
    KIDS_ROUTINE,
    ELDER_CARE,
    COMPLETE_ALL_IN_ONE,
)
