"""Prompts for proposal section generation.

각 템플릿은 {requirements} 자리에 요구사항 블록(채워진 항목만)을,
generic 템플릿은 {section_title} 자리에 사용자 지정 제목을 받습니다.
표 컬럼과 제목 문자열은 contracts 모듈의 상수를 그대로 삽입합니다.
"""

from ..contracts import (
    ADDITIONAL_FEATURES_COLUMNS,
    DEVELOPMENT_COST_COLUMNS,
    DIAGRAM_INSTRUCTION_LINE,
    OPERATIONAL_COLUMNS,
    RETAINER_COLUMNS,
    ROI_HEADINGS,
    TIMELINE_COLUMNS,
    TOTAL_INVESTMENT_COLUMNS,
    VALUE_PROPOSITION_HEADINGS,
    format_heading_list,
    markdown_header,
)

WRITER_ROLE = "You are a professional proposal writer."

EXECUTIVE_SUMMARY_PROMPT = f"""{WRITER_ROLE} Generate an Executive Summary with exactly 2 sentences.

Required structure:
1. Sentence 1: "Our [solution type] is designed to help your [client's business type] [main goal/benefit]."
2. Sentence 2: "Our platform combines [key feature 1] with [key feature 2], helping your [business] to [primary outcome] while [secondary benefit]."

Rules:
- Exactly 2 sentences only
- Use simple, clear language with no technical jargon
- Focus on what the solution does for the client

Business requirements:
{{requirements}}

Return only the executive summary text, no additional formatting."""

PROJECT_OVERVIEW_PROMPT = f"""{WRITER_ROLE} Generate a Project Overview as a vertical list of exactly 5 bullet points, each on its own line:

* [Your company] will deliver [solution type] to address [client company]'s [specific challenge/need].
* The solution combines [main component 1] and [main component 2] with [backend/integration detail].
* Key features: [feature 1], [feature 2], and [feature 3] with [additional capability].
* The platform improves [operational benefit] by [process improvement 1], [process improvement 2], and [business insight benefit].
* Success will be defined by delivering [main outcome] and gaining [business value] through [method/approach].

Rules:
- Start every line with an asterisk (*) followed by a space
- One complete sentence per bullet point
- No percentages, numbers, costs, or dates

Business requirements:
{{requirements}}"""

THE_PROBLEM_PROMPT = f"""{WRITER_ROLE} Generate "The Problem" section as a single paragraph of 2-3 sentences:

"Most [client's industry/business type] [main challenge/pain point], and [secondary challenge that compounds the problem]."

Rules:
- One paragraph, no bullet points or asterisks
- Start with "Most [industry/business type]..."
- Include one secondary related problem
- Make it relatable to the client's industry

Business requirements:
{{requirements}}"""

OUR_SOLUTION_PROMPT = f"""{WRITER_ROLE} Generate "Our Solution" section as a single paragraph of 2-3 sentences:

"Our [solution type] is designed to [primary benefit/outcome] while [secondary benefit]. The platform [key functionality] to help your [business type] [main business goal]."

Rules:
- One paragraph, no bullet points or asterisks
- Start with "Our [solution type]..."
- Keep it outcome-focused with no technical jargon

Business requirements:
{{requirements}}"""

KEY_FEATURES_PROMPT = f"""{WRITER_ROLE} Generate a Key Features section with exactly 6 numbered feature groups:

**1. [Feature Group Name]**
● [Capability]
● [Capability]
● [Capability]

Rules:
- Each group title is bold and numbered (**1. Title**)
- Exactly 3 capabilities per group, each starting with the filled circle (●)
- Leave one blank line between groups
- Capabilities are short phrases, not sentences

Business requirements:
{{requirements}}"""

KEY_VALUE_PROPOSITIONS_PROMPT = f"""{WRITER_ROLE} Generate a Key Value Propositions section using exactly these category headings, in this order, each on its own line:
{format_heading_list(VALUE_PROPOSITION_HEADINGS)}

Under each heading write 2-3 bullet points:
● [Specific client benefit as a complete sentence]

Rules:
- Plain text headings exactly as written above, including the trailing colon, no bold or numbering
- Use the filled circle (●) for every bullet point
- Focus on competitive advantages and business value specific to the client's industry
- No introductory or closing text

Business requirements:
{{requirements}}"""

BENEFITS_AND_ROI_PROMPT = f"""{WRITER_ROLE} Generate a Benefits & ROI section using exactly these category headings, in this order, each on its own line:
{format_heading_list(ROI_HEADINGS)}

Under each heading write 3-4 bullet points:
● [Benefit area]: [description of the improvement]

Rules:
- Plain text headings exactly as written above, including the trailing colon, no bold formatting
- Use the filled circle (●) for every bullet point
- Focus on measurable business outcomes but give no specific numbers or percentages
- No introductory or explanatory text

Business requirements:
{{requirements}}"""

NEXT_STEPS_PROMPT = f"""{WRITER_ROLE} Generate a Next Steps section as a numbered list of 5-6 steps, from signing the proposal to go-live and support.

Rules:
- Format each step as "1. [Step]" on its own line
- Each step is a short action phrase
- No headings or introductory text

Business requirements:
{{requirements}}"""

DEVELOPMENT_COST_PROMPT = f"""{WRITER_ROLE} Generate a One Time Development Cost section.

Start with the line "Includes:" followed by 3-5 bullet points that start with "* ".
Then write a markdown table with exactly these columns:

{markdown_header(DEVELOPMENT_COST_COLUMNS)}

Rules:
- 4-6 component rows with realistic estimates in the client's currency
- The last row is "| Development Cost |  | [total] |"
- Estimates must add up to the total and fit the stated budget
- No text after the table

Business requirements:
{{requirements}}"""

ADDITIONAL_FEATURES_PROMPT = f"""{WRITER_ROLE} Generate an Additional Features Recommended section as a markdown table with exactly these columns:

{markdown_header(ADDITIONAL_FEATURES_COLUMNS)}

Rules:
- 3-5 optional features that would extend the core solution
- One sentence per description
- Costs in the client's currency
- No text before or after the table

Business requirements:
{{requirements}}"""

OPERATIONAL_COSTS_PROMPT = f"""{WRITER_ROLE} Generate an Operational Costs (Monthly) section as a markdown table with exactly these columns:

{markdown_header(OPERATIONAL_COLUMNS)}

Rules:
- Rows for hosting, database, third-party services, monitoring, and any API usage the project needs
- The last row is "| Total | [monthly total] | [note] |"
- Monthly costs in the client's currency
- No text before or after the table

Business requirements:
{{requirements}}"""

MONTHLY_RETAINER_PROMPT = f"""{WRITER_ROLE} Generate a Monthly Retainer Fee section.

Write one sentence describing what the retainer covers, then a markdown table with exactly these columns:

{markdown_header(RETAINER_COLUMNS)}

Rules:
- Rows for support hours, maintenance, minor enhancements, and the monthly fee
- Amounts in the client's currency
- No text after the table

Business requirements:
{{requirements}}"""

TOTAL_INVESTMENT_PROMPT = f"""{WRITER_ROLE} Generate a Total Investment from Client section as a markdown table with exactly these columns:

{markdown_header(TOTAL_INVESTMENT_COLUMNS)}

Rules:
- Rows for one time development, first-year operational costs, and first-year retainer
- The last row is "| Total Investment | [sum] | First year |"
- Amounts in the client's currency and consistent with the stated budget
- No text before or after the table

Business requirements:
{{requirements}}"""

IMPLEMENTATION_TIMELINE_PROMPT = f"""{WRITER_ROLE} Generate an Implementation Timeline as a markdown table with exactly these columns:

{markdown_header(TIMELINE_COLUMNS)}

Rules:
- 5-6 phases from requirements gathering to training and handover
- The last row is "| Total | [overall duration] | Complete project delivery |"
- Every row must fit on one line: write activities as one comma-separated sentence
- Do not use line breaks, <br> tags, or bold text inside cells
- Finish before the client's target date

Business requirements:
{{requirements}}"""

PROCESS_FLOW_PROMPT = f"""{WRITER_ROLE} Generate a Process Flow Diagram section.

Write one short paragraph describing the end-to-end user and data flow, then a Mermaid flowchart in a fenced code block:

```mermaid
flowchart TD
    A[Start] --> B[Step]
```

After the code block add exactly this line:
{DIAGRAM_INSTRUCTION_LINE}

Rules:
- 6-10 nodes using flowchart TD syntax with square-bracket labels
- No other text

Business requirements:
{{requirements}}"""

TECHNICAL_ARCHITECTURE_PROMPT = f"""{WRITER_ROLE} Generate a Technical Architecture section.

Start with a bullet list of the technology stack (frontend, backend, database, hosting, integrations) using "* " bullets, then a Mermaid diagram of the components in a fenced code block:

```mermaid
flowchart LR
    Client[Web App] --> API[Backend API]
```

After the code block add exactly this line:
{DIAGRAM_INSTRUCTION_LINE}

Rules:
- 5-8 components with square-bracket labels
- No other text

Business requirements:
{{requirements}}"""

GENERIC_SECTION_PROMPT = f"""{WRITER_ROLE} Generate content for a business proposal section titled "{{section_title}}".

Rules:
- Professional, specific content aligned with the project and the client's industry
- Use short paragraphs and "* " bullet points where helpful
- Do not repeat the section title

Business requirements:
{{requirements}}"""
