# engine/wow/statements.py
"""
Catalogue des énoncés Way of Work : 15 angles × 3 niveaux × 5 énoncés.

Progression Shu-Ha-Ri :
  shu → les fondamentaux sont-ils en place ?
  ha  → améliorons-nous de façon intentionnelle ?
  ri  → créons-nous notre propre approche ?

Un énoncé est observable (vérifiable par un tiers), jamais "Do you feel...".
Les énoncés shu des angles historiques portent un axe de travail
(focus_area) et une expérience de deux semaines ; la synthèse retombe sur
DEFAULT_FOCUS_AREA / DEFAULT_EXPERIMENT pour les autres.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from pulse.shared.enums import WowAngle, WowLevel


@dataclass(frozen=True)
class Statement:
    id: str
    angle: WowAngle
    level: WowLevel
    text: str
    focus_area: Optional[str] = None
    experiment: Optional[str] = None


@dataclass(frozen=True)
class AngleInfo:
    id: WowAngle
    label: str
    description: str


@dataclass(frozen=True)
class LevelInfo:
    id: WowLevel
    kanji: str
    label: str
    subtitle: str
    description: str


# Ordre significatif : les 5 premiers angles sont les essentiels (tier gratuit)
ANGLES: List[AngleInfo] = [
    AngleInfo(WowAngle.RETRO, "Retro", "Are we improving? Do actions lead to change?"),
    AngleInfo(WowAngle.PLANNING, "Planning", "Is commitment realistic? Is the Sprint Goal clear?"),
    AngleInfo(WowAngle.SCRUM, "Scrum", "Are events useful? Is the framework helping?"),
    AngleInfo(WowAngle.FLOW, "Flow", "Is work moving? Are we finishing what we start?"),
    AngleInfo(WowAngle.COLLABORATION, "Collaboration", "Are we working together? Is knowledge shared?"),
    AngleInfo(WowAngle.REFINEMENT, "Refinement", "Are stories ready? Is the backlog actionable?"),
    AngleInfo(WowAngle.OWNERSHIP, "Ownership", "Does the team own it? Can we act without asking?"),
    AngleInfo(WowAngle.TECHNICAL_EXCELLENCE, "Technical Excellence", "Is the code getting better? Are we building quality in?"),
    AngleInfo(WowAngle.DEMO, "Review", "Are stakeholders engaged? Is feedback valuable?"),
    AngleInfo(WowAngle.OBEYA, "Obeya", "Is work visible? Does the team align around shared visuals?"),
    AngleInfo(WowAngle.DEPENDENCIES, "Dependencies", "Are cross-team dependencies managed? Do handoffs work?"),
    AngleInfo(WowAngle.PSYCHOLOGICAL_SAFETY, "Psychological Safety", "Can we speak up? Is it safe to fail?"),
    AngleInfo(WowAngle.DEVOPS, "DevOps", "Is deployment smooth? Do we own our pipeline?"),
    AngleInfo(WowAngle.STAKEHOLDER, "Stakeholders", "Are stakeholders aligned? Is communication proactive?"),
    AngleInfo(WowAngle.LEADERSHIP, "Leadership", "Do leaders enable teams? Is direction clear?"),
]

ESSENTIAL_ANGLE_COUNT = 5
FREE_ANGLES = frozenset(a.id for a in ANGLES[:ESSENTIAL_ANGLE_COUNT])

LEVELS: List[LevelInfo] = [
    LevelInfo(WowLevel.SHU, "守", "Shu", "Learn the basics",
              "Follow the structure. Build the habit. Trust the process."),
    LevelInfo(WowLevel.HA, "破", "Ha", "Adapt intentionally",
              "Question the rules. Experiment safely. Find what works for your team."),
    LevelInfo(WowLevel.RI, "離", "Ri", "Mastery & own approach",
              "Transcend the framework. Create your own process. Lead by example."),
]

DEFAULT_FOCUS_AREA = "Team process improvement"
DEFAULT_EXPERIMENT = "Define a specific 2-week experiment targeting this area."

_A = WowAngle
_L = WowLevel

# ── Énoncés par (angle, niveau) ───────────────────────────

_TEXTS: Dict[Tuple[WowAngle, WowLevel], List[str]] = {
    # Scrum
    (_A.SCRUM, _L.SHU): [
        "The Sprint Goal was achieved last Sprint",
        "The Daily Scrum takes less than 15 minutes",
        "The Product Owner was available for questions last Sprint",
        "Sprint scope did not change after Sprint Planning",
        "The Retrospective produced at least one concrete action",
    ],
    (_A.SCRUM, _L.HA): [
        "We adapted Scrum events to better fit our context",
        "The team experiments with different meeting formats",
        "We measure and track our own velocity or throughput",
        "Sprint length was chosen based on our delivery needs",
        "We consciously break rules when it makes sense",
    ],
    (_A.SCRUM, _L.RI): [
        "We created our own cadence that transcends Scrum",
        "The team self-organizes without needing a Scrum Master",
        "We coach other teams on effective practices",
        "Our process evolved from team experimentation",
        "We deliver value continuously, not just at Sprint end",
    ],

    # Flow
    (_A.FLOW, _L.SHU): [
        "I worked on only one item at a time last week",
        "Items move from In Progress to Done within 3 days",
        "Code reviews happen within 4 hours",
        "I know exactly what I should work on next",
        "The board reflects reality right now",
    ],
    (_A.FLOW, _L.HA): [
        "WIP limits are enforced, not ignored",
        "We track cycle time and act on the data",
        "Blockers are escalated within hours, not days",
        "We visualize bottlenecks and address them systematically",
        "Deployments happen at least weekly",
    ],
    (_A.FLOW, _L.RI): [
        "We optimize for flow across the entire value stream",
        "We proactively identify and remove systemic bottlenecks",
        "Lead time is predictable within a narrow range",
        "We help other teams improve their flow",
        "Continuous deployment is the default, not the exception",
    ],

    # Ownership
    (_A.OWNERSHIP, _L.SHU): [
        "I know who is on-call and how to reach them",
        "I have access to production logs",
        "The team decides how to do the work, not external leads",
        "When something breaks, we fix it first and blame never",
        "I understand our team's main responsibilities",
    ],
    (_A.OWNERSHIP, _L.HA): [
        "I can deploy my code to production without asking permission",
        "I fixed a bug last week without being assigned to it",
        "The team owns the backlog prioritization, not just the PO",
        "I participated in an incident review this quarter",
        "I refactored code this month that I did not originally write",
    ],
    (_A.OWNERSHIP, _L.RI): [
        "I can create a new service without filing a ticket",
        "The team decided on technical approach, not a lead or architect",
        "We define our own success metrics",
        "We proactively reach out to stakeholders before they ask",
        "We sunset our own features when they no longer serve users",
    ],

    # Collaboration
    (_A.COLLABORATION, _L.SHU): [
        "I asked for help when I was stuck",
        "Someone asked me for help this week",
        "I know what my teammates are working on right now",
        "In the last Retro, everyone spoke at least once",
        "Knowledge is documented, not just in people's heads",
    ],
    (_A.COLLABORATION, _L.HA): [
        "I paired with a teammate on a task this week",
        "I received specific feedback on my work this week",
        "Disagreements are discussed openly, not avoided",
        "New team members can contribute within their first week",
        "We celebrate wins together, not just individually",
    ],
    (_A.COLLABORATION, _L.RI): [
        "We actively mentor team members and others outside our team",
        "Our team is sought out for advice by other teams",
        "We have created cross-team communities of practice",
        "Psychological safety is something we actively cultivate",
        "We adapt our collaboration style based on the situation",
    ],

    # Technical Excellence
    (_A.TECHNICAL_EXCELLENCE, _L.SHU): [
        "All code changes have automated tests",
        "I can run the full system locally",
        "We have clear coding standards that we follow",
        "Documentation is updated when code changes",
        "The test suite runs in under 10 minutes",
    ],
    (_A.TECHNICAL_EXCELLENCE, _L.HA): [
        "I refactored something this week without being asked",
        "Technical debt is tracked and prioritized",
        "We can roll back a bad deploy in under 5 minutes",
        "We review architecture decisions as a team",
        "Deployments are boring, not scary",
    ],
    (_A.TECHNICAL_EXCELLENCE, _L.RI): [
        "We contribute to our organization's technical standards",
        "We build tools that other teams use",
        "Our codebase is an example others learn from",
        "We experiment with new technologies and share learnings",
        "We proactively improve the developer experience for everyone",
    ],

    # Refinement
    (_A.REFINEMENT, _L.SHU): [
        "Stories have clear acceptance criteria before entering the Sprint",
        "The team understands the \"why\" behind each story",
        "Stories are small enough to complete in 2-3 days",
        "Refinement sessions are timeboxed and productive",
        "The backlog has at least 2 Sprints worth of ready items",
    ],
    (_A.REFINEMENT, _L.HA): [
        "Technical dependencies are identified before Sprint Planning",
        "The PO prioritizes based on value, not gut feeling",
        "Edge cases are discussed during refinement, not during development",
        "Developers ask clarifying questions during refinement",
        "Stories are estimated by the whole team, not one person",
    ],
    (_A.REFINEMENT, _L.RI): [
        "We involve end users directly in refinement",
        "We challenge whether a feature should be built at all",
        "We define success metrics before starting work",
        "Our refinement practices are shared with other teams",
        "We continuously experiment with better ways to refine",
    ],

    # Planning
    (_A.PLANNING, _L.SHU): [
        "The Sprint Goal is clear and achievable",
        "The team committed to scope they believe in",
        "Capacity for planned absences was accounted for",
        "Planning took less than 2 hours",
        "Everyone in the team participated in planning discussions",
    ],
    (_A.PLANNING, _L.HA): [
        "Sprint Planning ends with a shared plan, not assigned tasks",
        "The Sprint Goal connects to a business outcome",
        "We discussed how we will achieve the goal, not just what",
        "Dependencies on other teams were identified and addressed",
        "The Sprint Backlog is realistic, not aspirational",
    ],
    (_A.PLANNING, _L.RI): [
        "Our planning connects to long-term product vision",
        "We help shape the product roadmap, not just execute it",
        "We balance short-term delivery with long-term sustainability",
        "Our planning considers organizational constraints proactively",
        "We adapt our planning approach based on context",
    ],

    # Retro
    (_A.RETRO, _L.SHU): [
        "The last Retro produced at least one concrete action",
        "Retro actions from last Sprint were completed",
        "Everyone felt safe to speak up in the Retro",
        "Retro actions have clear owners",
        "Positive things were celebrated, not just problems",
    ],
    (_A.RETRO, _L.HA): [
        "We discussed root causes, not just symptoms",
        "The Retro format varies to keep it fresh",
        "The Scrum Master facilitates, not dominates",
        "We learn from what went well, not just what went wrong",
        "The team decided on actions, not the Scrum Master",
    ],
    (_A.RETRO, _L.RI): [
        "Our retro insights lead to organizational improvements",
        "We facilitate retros for other teams",
        "We create new retrospective formats",
        "Continuous improvement is embedded in daily work, not just retros",
        "We share our improvement journey with the organization",
    ],

    # Demo (Sprint Review)
    (_A.DEMO, _L.SHU): [
        "Stakeholders attended the last Sprint Review",
        "The demo showed working software, not slides",
        "The Sprint Goal was clearly demonstrated",
        "Developers presented their own work",
        "The demo was timeboxed and focused",
    ],
    (_A.DEMO, _L.HA): [
        "Stakeholder feedback was captured and added to the backlog",
        "Stakeholders asked questions during the demo",
        "The PO confirmed whether the Sprint Goal was met",
        "Future direction was discussed based on what was learned",
        "Incomplete work was shown transparently, not hidden",
    ],
    (_A.DEMO, _L.RI): [
        "Our demos influence product strategy",
        "We demo to external customers, not just internal stakeholders",
        "Our demo format has been adopted by other teams",
        "We gather quantitative feedback, not just qualitative",
        "We demonstrate impact on business outcomes, not just features",
    ],

    # Obeya
    (_A.OBEYA, _L.SHU): [
        "Our team goals are visible to everyone in one place",
        "Progress toward sprint goals is updated daily on a shared board",
        "Impediments are made visible as soon as they arise",
        "Key metrics are displayed where the team can see them",
        "We have a regular cadence where the team gathers around shared visuals",
    ],
    (_A.OBEYA, _L.HA): [
        "Our visual boards drive the conversation, not replace it",
        "We update our metrics based on what we learn, not habit",
        "Cross-team dependencies are visualized and actively managed",
        "Our Obeya reflects current reality, not last week's truth",
        "Stakeholders visit our Obeya to understand our situation",
    ],
    (_A.OBEYA, _L.RI): [
        "Our visual management style has been adopted by other teams",
        "We connect team-level visuals to organizational strategy",
        "Our Obeya evolves as our team's needs change",
        "We use our visual space to facilitate strategic conversations",
        "We coach other teams on effective visual management",
    ],

    # Dependencies
    (_A.DEPENDENCIES, _L.SHU): [
        "We know which teams depend on us and which we depend on",
        "Dependencies are identified before work starts",
        "We communicate blockers to dependent teams within hours",
        "Cross-team handoffs have clear ownership",
        "We attend cross-team sync meetings when relevant",
    ],
    (_A.DEPENDENCIES, _L.HA): [
        "We proactively reduce dependencies through API contracts",
        "Dependency risks are tracked and mitigated before they block",
        "We negotiate delivery timelines directly with other teams",
        "Integration testing with dependent teams happens regularly",
        "We visualize our dependency map and keep it current",
    ],
    (_A.DEPENDENCIES, _L.RI): [
        "We have eliminated most hard dependencies through decoupling",
        "We help other teams become less dependent on us",
        "Our architecture decisions consider cross-team impact",
        "We contribute to organization-wide dependency management",
        "We proactively refactor shared interfaces to reduce coupling",
    ],

    # Psychological Safety
    (_A.PSYCHOLOGICAL_SAFETY, _L.SHU): [
        "I can admit mistakes without fear of blame",
        "Disagreement is expressed openly in team meetings",
        "Questions are welcomed, not dismissed",
        "Team members speak up when they see a problem",
        "Nobody was interrupted or talked over in the last meeting",
    ],
    (_A.PSYCHOLOGICAL_SAFETY, _L.HA): [
        "We give each other direct, honest feedback regularly",
        "Failed experiments are discussed as learning opportunities",
        "Junior members challenge senior members' ideas",
        "We discuss interpersonal tensions, not just technical problems",
        "Vulnerability is treated as strength, not weakness",
    ],
    (_A.PSYCHOLOGICAL_SAFETY, _L.RI): [
        "We actively create space for dissenting opinions",
        "Our team culture of safety has been adopted by other teams",
        "We address systemic barriers to psychological safety",
        "We facilitate difficult conversations across the organization",
        "Newcomers report feeling safe within their first week",
    ],

    # DevOps
    (_A.DEVOPS, _L.SHU): [
        "We deploy to production at least once a week",
        "Our CI pipeline runs on every pull request",
        "Monitoring alerts go to the team, not just ops",
        "We have runbooks for common incidents",
        "Deployments require no manual steps",
    ],
    (_A.DEVOPS, _L.HA): [
        "We can deploy multiple times per day without coordination",
        "Feature flags separate deployment from release",
        "We own our infrastructure configuration as code",
        "Mean time to recovery is under one hour",
        "We review production metrics after every deployment",
    ],
    (_A.DEVOPS, _L.RI): [
        "Continuous deployment is our default, not a goal",
        "We contribute to the organization's platform and tooling",
        "Our deployment pipeline is a reference for other teams",
        "We proactively improve observability across services",
        "We experiment with chaos engineering or resilience testing",
    ],

    # Stakeholders
    (_A.STAKEHOLDER, _L.SHU): [
        "Stakeholders know when and how to reach the team",
        "We share progress updates at least once per sprint",
        "Stakeholder feedback is captured and added to the backlog",
        "The Product Owner represents stakeholder needs in planning",
        "We know who our key stakeholders are and what they need",
    ],
    (_A.STAKEHOLDER, _L.HA): [
        "We invite stakeholders to give feedback on working software",
        "Stakeholder expectations are managed proactively, not reactively",
        "We say no to requests that conflict with the Sprint Goal",
        "We present trade-offs and options, not just solutions",
        "Stakeholders trust the team to make technical decisions",
    ],
    (_A.STAKEHOLDER, _L.RI): [
        "We co-create the product roadmap with stakeholders",
        "Stakeholders advocate for the team's needs to leadership",
        "We influence strategic decisions beyond our team boundary",
        "Our stakeholder communication model has been adopted by others",
        "We actively seek out new stakeholders we should engage with",
    ],

    # Leadership
    (_A.LEADERSHIP, _L.SHU): [
        "Leaders communicate clear priorities to their teams",
        "One-on-ones happen regularly and are not cancelled",
        "Leaders remove blockers when teams escalate",
        "Team members know the organizational direction",
        "Leaders attend team demos and retrospectives",
    ],
    (_A.LEADERSHIP, _L.HA): [
        "Leaders create space for teams to make their own decisions",
        "Feedback flows both ways between leaders and teams",
        "Leaders experiment with different leadership styles",
        "Strategic trade-offs are communicated transparently",
        "Leaders actively coach, not just manage",
    ],
    (_A.LEADERSHIP, _L.RI): [
        "Leaders develop other leaders within the organization",
        "Our leadership approach has been recognized outside the organization",
        "Leaders facilitate cross-team collaboration at a systemic level",
        "Psychological safety is a leadership KPI, not just a value",
        "Leaders question and adapt the organizational structure",
    ],
}

# ── Axe de travail + expérience (énoncés shu) ─────────────

_GUIDANCE: Dict[str, Tuple[str, str]] = {
    "scrum_shu_1": ("Sprint Goal achievement",
                    "Define the Sprint Goal before selecting any items. Check in on it daily."),
    "scrum_shu_2": ("Daily Scrum efficiency",
                    "Use a timer. Everyone gets 1 minute. If the Daily runs over, discuss why in the Retro."),
    "scrum_shu_3": ("Product Owner availability",
                    "Block 2 hours daily where the PO is available for questions. No meetings in this window."),
    "scrum_shu_4": ("Sprint scope stability",
                    "If scope is added after Planning, something of equal size is removed immediately."),
    "scrum_shu_5": ("Retrospective outcomes",
                    "At the end of each Retro, the team votes on exactly one action."),

    "flow_shu_1": ("Work in Progress limits", "Strict WIP limit of 1 per person for 2 weeks."),
    "flow_shu_2": ("Cycle time", "An item In Progress for 3+ days becomes the team's top priority."),
    "flow_shu_3": ("Code review speed", "All PRs reviewed within 4 hours during work hours. Make violations visible."),
    "flow_shu_4": ("Work clarity", "Each morning, everyone writes their one focus item on a card. No switching."),
    "flow_shu_5": ("Board accuracy",
                   "Update the board before each Daily. If it is not current, that is the first topic."),

    "ownership_shu_1": ("On-call awareness",
                        "Create a one-pager: who is on-call, how to reach them, what to do first."),
    "ownership_shu_2": ("Production access", "Give everyone read access to production logs. No approval needed."),
    "ownership_shu_3": ("Technical decision authority",
                        "Next technical decision: the team discusses and decides. Architects advise only."),
    "ownership_shu_4": ("Blameless culture", "After every incident, ask \"What broke?\" not \"Who broke it?\""),
    "ownership_shu_5": ("Team mandate clarity",
                        "Write the team's responsibilities on one page and review it together."),

    "collaboration_shu_1": ("Help-seeking behavior",
                            "Create a \"stuck? ask here\" channel. Celebrate quick responses."),
    "collaboration_shu_2": ("Pairing", "Pair on at least one task per Sprint. Rotate pairs."),
    "collaboration_shu_3": ("Work visibility",
                            "Start the Daily with a quick board walk. Everyone points to their item."),
    "collaboration_shu_4": ("Meeting participation",
                            "Use a round-robin format: everyone speaks before anyone speaks twice."),
    "collaboration_shu_5": ("Documentation",
                            "When you learn something undocumented, document it before moving on."),

    "technical_excellence_shu_1": ("Test coverage", "No PR merges without tests for changed code. Enforce it in CI."),
    "technical_excellence_shu_2": ("Local development setup",
                                   "New member test: can they run locally in 30 minutes? If not, fix the setup."),
    "technical_excellence_shu_3": ("Coding standards", "Write down 3 coding standards. Enforce them in code review."),
    "technical_excellence_shu_4": ("Documentation maintenance",
                                   "Every code change to a feature updates its docs in the same PR."),
    "technical_excellence_shu_5": ("Test suite speed",
                                   "If tests take over 10 minutes, fixing that is top priority next Sprint."),

    "refinement_shu_1": ("Acceptance criteria",
                         "No story enters the Sprint without acceptance criteria written by the team."),
    "refinement_shu_2": ("Story purpose",
                         "Start every refinement item with the problem it solves, before any solution."),
    "refinement_shu_3": ("Story size", "Split any story estimated above 3 days before it enters the Sprint."),
    "refinement_shu_4": ("Refinement efficiency",
                         "Timebox refinement to 1 hour with a visible timer and a prepared agenda."),
    "refinement_shu_5": ("Backlog readiness",
                         "Track the number of ready items weekly. Refine until 2 Sprints are ready."),

    "planning_shu_1": ("Sprint Goal clarity",
                       "Write the Sprint Goal in one sentence before Planning ends. Everyone must be able to repeat it."),
    "planning_shu_2": ("Realistic commitment", "End Planning with a confidence vote (1-5). Below 3, reduce scope."),
    "planning_shu_3": ("Capacity planning", "Start Planning by listing absences and subtracting them from capacity."),
    "planning_shu_4": ("Planning efficiency", "Timebox Planning to 2 hours. Prepare the top items during refinement."),
    "planning_shu_5": ("Planning participation", "Each team member explains at least one item during Planning."),

    "retro_shu_1": ("Retro actions", "End each Retro with one action, an owner and a date."),
    "retro_shu_2": ("Retro action follow-through",
                    "Track the action on the board. If not done, it becomes the only action next Retro."),
    "retro_shu_3": ("Retro safety", "Open the Retro with silent writing before any discussion."),
    "retro_shu_4": ("Action ownership", "No action leaves the Retro without a named owner."),
    "retro_shu_5": ("Team celebration", "Start each Retro with 5 minutes of naming specific wins."),
}


def _build_catalogue() -> List[Statement]:
    statements: List[Statement] = []
    for (angle, level), texts in _TEXTS.items():
        for n, text in enumerate(texts, start=1):
            statement_id = f"{angle.value}_{level.value}_{n}"
            focus, experiment = _GUIDANCE.get(statement_id, (None, None))
            statements.append(Statement(statement_id, angle, level, text, focus, experiment))
    return statements


STATEMENTS: List[Statement] = _build_catalogue()

_BY_ID: Dict[str, Statement] = {s.id: s for s in STATEMENTS}


def get_statements(angle: WowAngle, level: WowLevel = WowLevel.SHU) -> List[Statement]:
    return [s for s in STATEMENTS if s.angle == angle and s.level == level]


def get_statement(statement_id: str) -> Optional[Statement]:
    return _BY_ID.get(statement_id)


def get_angle_info(angle: WowAngle) -> AngleInfo:
    return next((a for a in ANGLES if a.id == angle), ANGLES[0])


def get_level_info(level: WowLevel) -> LevelInfo:
    return next((lv for lv in LEVELS if lv.id == level), LEVELS[0])


def is_angle_unlocked(angle: WowAngle, max_angles: int) -> bool:
    """max_angles vient de TierConfig : les `max_angles` premiers angles du catalogue."""
    return angle in {a.id for a in ANGLES[:max_angles]}


def is_level_unlocked(level: WowLevel, wow_levels) -> bool:
    return level in wow_levels
