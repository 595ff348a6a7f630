from __future__ import annotations

ANALYST_SYSTEM_PROMPT = (
    "You are an expert product innovation consultant who turns synthetic consumer interviews "
    "into precise, evidence-based concept optimization analyses. Return JSON only."
)

CONSOLIDATED_DATA_TEMPLATE = """
CONSOLIDATED DATA FROM {count} SYNTHETIC INTERVIEWS

CONCEPT EVALUATED:
- Name: {name}
- Description: {description}
- Category: {category}
- Promised benefits: {benefits}
- Target audience: {target}
- Price tier: {price_tier}

PROFILES INTERVIEWED:
{profiles}

FULL CONVERSATIONS:
{conversations}
""".strip()

PROFILE_TEMPLATE = """
{index}. {name}
   - Age: {age}
   - City: {city}
   - Occupation: {occupation}
   - Socioeconomic tier: {tier}
   - Current brand user: {brand_user}
   - Price sensitivity: {price_sensitivity}/10
""".strip()

INTERVIEW_TEMPLATE = """
--- INTERVIEW {index}: {name} ---
{exchanges}

KEY INSIGHTS FROM THIS INTERVIEW:
{insights}
""".strip()

OPTIMIZATION_PROMPT = """
# CONCEPT OPTIMIZATION ANALYSIS

Analyze the synthetic interviews to decide whether the concept "{concept_name}" should:
1. GO to traditional research (it is ready)
2. REFINE before testing (it needs specific adjustments)
3. NO-GO (the barriers cannot be overcome)

## DATA TO ANALYZE
{data}

## REQUIRED ANALYSIS
1. Strategic decision: a clear recommendation, a confidence level (1-100), evidence-based
   reasoning and specific next steps.
2. Five to eight optimization insights, each categorized as CRITICAL (must be fixed or the
   concept fails), IMPORTANT (likely significant improvement) or RECOMMENDATION (incremental),
   with a description, specific evidence from the interviews, action items and an expected
   impact of HIGH, MEDIUM or LOW.
3. Key findings: strengths, weaknesses and surprising findings.
4. Specific optimizations for messaging, positioning, features and pricing.
5. Research recommendations: what must be validated in the field, priority segments and the
   suggested methodology.

## RESPONSE FORMAT
Respond with a single JSON object using exactly this structure:
""".strip()

RESPONSE_SCHEMA = """
{
  "decision": {
    "recommendation": "GO|REFINE|NO-GO",
    "confidence": 85,
    "reasoning": "Clear, evidence-based justification",
    "nextSteps": ["Action 1", "Action 2", "Action 3"]
  },
  "insights": [
    {
      "category": "CRITICAL",
      "title": "Confusion about the main benefit",
      "description": "Consumers do not clearly understand what makes the product different",
      "evidence": ["Interview quote 1", "Interview quote 2"],
      "actionItems": ["Simplify the message", "Clarify the unique benefit"],
      "impact": "HIGH"
    }
  ],
  "keyFindings": {
    "strengthPoints": ["Strength 1"],
    "weaknessPoints": ["Weakness 1"],
    "surprisingFindings": ["Unexpected finding 1"]
  },
  "targetOptimization": {
    "messaging": ["Optimized message 1"],
    "positioning": ["Suggested positioning 1"],
    "features": ["Feature adjustment 1"],
    "pricing": ["Detected price expectation"]
  },
  "researchRecommendations": {
    "mustValidate": ["Critical aspect to validate"],
    "segments": ["Priority segment 1"],
    "methodology": ["Suggested method 1"]
  }
}

Be specific and actionable, and base every recommendation on clear evidence from the interviews.
""".strip()
