"""Prompt builders for construction-item extraction."""

from __future__ import annotations

from ..llm_client import AIProvider

MAX_ITEMS = 75


def build_claude_prompt(text: str) -> str:
    """Return the XML-sectioned prompt used with Claude."""

    return (
        "You are a construction data extraction specialist. I need you to analyze PDF "
        "text content and extract structured construction data.\n\n"
        "<document_text>\n"
        f"{text}\n"
        "</document_text>\n\n"
        "<task>\n"
        "Extract ALL construction items, fixtures, and equipment from the document above. "
        "This may include:\n"
        "- Mechanical equipment (HVAC, pumps, boilers, etc.)\n"
        "- Electrical components (conduit, fixtures, panels, etc.)\n"
        "- Plumbing fixtures and piping\n"
        "- Fire protection systems\n"
        "- Building materials and components\n"
        "- Any item with specifications, quantities, or model numbers\n"
        "</task>\n\n"
        "<output_format>\n"
        "You must return ONLY a valid JSON object with no additional text, explanations, "
        "or markdown formatting. Use this exact structure:\n\n"
        "{\n"
        '  "summary": "Brief description of document type and key findings (max 200 chars)",\n'
        '  "totalItemsFound": 0,\n'
        '  "documentType": "Type of document (e.g. Equipment Schedule, Mechanical Plans, etc.)",\n'
        '  "extractedItems": [\n'
        "    {\n"
        '      "itemType": "Category (e.g. HVAC Equipment, Electrical Conduit, Plumbing Fixtures)",\n'
        '      "quantity": "Amount with units (e.g. 2 EA, 100 LF) or N/A",\n'
        '      "modelNumber": "Model/part number or N/A",\n'
        '      "specReference": "Specification section/reference or N/A",\n'
        '      "pageReference": "Page/drawing reference or N/A",\n'
        '      "dimensions": "Size/capacity with units or N/A",\n'
        '      "mountingType": "Installation method or N/A",\n'
        '      "additionalNotes": "Material, finish, special requirements or N/A"\n'
        "    }\n"
        "  ],\n"
        '  "recommendations": [\n'
        '    "Actionable recommendation for construction team",\n'
        '    "Procurement or scheduling suggestion",\n'
        '    "Quality control or coordination note"\n'
        "  ]\n"
        "}\n"
        "</output_format>\n\n"
        "<extraction_rules>\n"
        '1. Use "N/A" for any missing information - never use null, empty strings, or undefined\n'
        "2. Keep all text values simple and avoid special characters that could break JSON\n"
        f"3. Extract up to {MAX_ITEMS} most important items to prevent response truncation\n"
        "4. Ensure totalItemsFound matches the length of extractedItems array\n"
        "5. Look for items in tables, schedules, specifications, and annotations\n"
        "6. Preserve original units for quantities (EA, LF, SF, GPM, CFM, etc.)\n"
        "7. Include voltage, pressure, temperature ratings in dimensions field\n"
        "8. Focus on actionable recommendations for construction professionals\n"
        "9. Don't group any extracted items, provide a complete list even if they are the same model\n"
        "</extraction_rules>\n\n"
        "Return only the JSON object with no other text."
    )


def build_gemini_prompt(text: str) -> str:
    """Return the formatting-rule heavy prompt used with Gemini."""

    return (
        "You are a construction data extraction specialist. Analyze the following PDF "
        "drawing set content which may contain technical drawings, schedules, cut sheets, "
        "specifications, or construction documents.\n\n"
        "Extract ALL relevant construction items/fixtures/equipment mentioned in the "
        "document.\n\n"
        "Text content:\n"
        f"{text}\n\n"
        "CRITICAL JSON FORMATTING RULES:\n"
        "1. Return ONLY valid JSON - no markdown, no extra text, no explanations\n"
        "2. Use double quotes for all strings\n"
        '3. Escape any quotes inside strings with \\"\n'
        "4. Keep all text values clean and simple\n"
        "5. If you encounter special characters, replace them with simple alternatives\n"
        "6. Ensure all JSON brackets and braces are properly closed\n"
        "7. Do not include line breaks within string values\n"
        f"8. Maximum {MAX_ITEMS} items to prevent response truncation\n\n"
        "Return the results in this EXACT JSON format:\n\n"
        "{\n"
        '  "summary": "Brief description of document type and findings (keep under 200 characters)",\n'
        '  "totalItemsFound": 0,\n'
        '  "documentType": "Document type (e.g. Mechanical Schedule, Electrical Plan, etc.)",\n'
        '  "extractedItems": [\n'
        "    {\n"
        '      "itemType": "Category (e.g. Pipe & Fittings, Ductwork, Electrical Conduit, etc.)",\n'
        '      "quantity": "Number with units (e.g. 12 EA, 50 LF) or N/A",\n'
        '      "modelNumber": "Model/part number or N/A",\n'
        '      "specReference": "Specification reference or N/A",\n'
        '      "pageReference": "Page/sheet or DRAWING NUMBER reference or N/A",\n'
        '      "dimensions": "Physical dimensions with units or N/A",\n'
        '      "mountingType": "Installation method or N/A",\n'
        '      "additionalNotes": "Other relevant details or N/A"\n'
        "    }\n"
        "  ],\n"
        '  "recommendations": [\n'
        '    "Actionable recommendation 1",\n'
        '    "Actionable recommendation 2",\n'
        '    "Actionable recommendation 3"\n'
        "  ]\n"
        "}\n\n"
        "EXTRACTION GUIDELINES:\n"
        "- Don't group any extracted items, provide a complete list of items even if they "
        "are the same model or part\n"
        "- Extract EVERY identifiable construction item, fixture, or equipment\n"
        '- Use "N/A" for missing information - never leave fields empty or null\n'
        "- Keep string values simple and avoid special characters\n"
        "- Focus on construction/building trades: mechanical, electrical, plumbing, "
        "fire protection\n"
        "- Include quantities with original units (EA, LF, SF, etc.)\n"
        f"- Limit to {MAX_ITEMS} items if document is very large\n"
        "- Ensure totalItemsFound matches extractedItems array length\n\n"
        "Return ONLY the JSON object - no additional text or formatting."
    )


def build_extraction_prompt(provider: AIProvider, text: str) -> str:
    """Return the prompt template for ``provider`` with ``text`` embedded."""

    if provider is AIProvider.CLAUDE:
        return build_claude_prompt(text)
    return build_gemini_prompt(text)


__all__ = ["MAX_ITEMS", "build_claude_prompt", "build_extraction_prompt", "build_gemini_prompt"]
