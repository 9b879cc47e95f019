"""Flavor data for generated calls: names, topics, departments and phrasing."""

# --- Callers ---

CALLERS = [
    "Alex", "Jordan", "Taylor", "Morgan", "Riley", "Casey", "Harper", "Drew", "Bailey", "Peyton",
    "Sam", "Jamie", "Chris", "Reese", "Avery", "Skyler", "Cameron", "Rowan", "Emerson", "Hayden",
]

# --- Routing and lookups ---

DEPARTMENTS = [
    "customer_service_team",
    "benefits_specialist_team",
    "tech_support_pod",
    "payroll_operations",
]

KNOWLEDGE_TOPICS = [
    "health benefits eligibility",
    "vpn troubleshooting steps",
    "holiday calendar",
    "expense reimbursement policy",
    "onboarding checklist",
    "password reset instructions",
    "training portal access",
    "remote work guidelines",
    "hardware replacement process",
    "travel approval workflow",
]

ORDER_STATUSES = ["processing", "shipped", "backordered", "delivered"]

BENEFIT_TYPES = ["health", "dental", "vision", "retirement"]

BENEFIT_PLANS = ["premium", "standard", "basic"]

PAYROLL_MONTHS = [
    "January", "February", "March", "April", "May",
    "June", "July", "August", "September", "October",
]

# --- Phrasing variants ---

KNOWLEDGE_QUESTIONS = [
    "I need more information on {topic}.",
    "Can you look up {topic}?",
    "What does the knowledge base say about {topic}?",
]

KNOWLEDGE_LOOKUPS = [
    "Let me check {topic}.",
    "I'll search the knowledge base for {topic}.",
    "Give me a moment to review {topic}.",
]

SMALL_TALK_CHECK_INS = [
    "Just checking if anything else is needed.",
    "Do you need additional assistance?",
    "Thanks for your patience while I double check the records.",
]

SMALL_TALK_REPLIES = [
    "No worries, I'm still here.",
    "Take your time, thank you.",
    "I appreciate the update.",
]
