from langchain_core.prompts import PromptTemplate

PROJECT_INFO_PREAMBLE = """You are a documentation builder.
Analyze the code and user instructions, then output a JSON object with a 'project_info' field summarizing:
- Purpose
- Key modules/classes/functions
- Data models or entities
"""

UML_INSTRUCTIONS_PREAMBLE = """You are a UML generation assistant.
Given the code and user instructions, output a JSON object with a 'uml_instructions' field describing which UML diagrams to generate (e.g., class, sequence, component) and key elements for each.
"""

_TEMPLATE = "{preamble}\nCode:\n{code}\nInstructions:\n{instructions}"

project_info_prompt = PromptTemplate(
    template=_TEMPLATE,
    input_variables=["code", "instructions"],
    partial_variables={"preamble": PROJECT_INFO_PREAMBLE},
)

uml_instructions_prompt = PromptTemplate(
    template=_TEMPLATE,
    input_variables=["code", "instructions"],
    partial_variables={"preamble": UML_INSTRUCTIONS_PREAMBLE},
)


def build_project_info_prompt(code: str, instructions: str) -> str:
    return project_info_prompt.format(code=code, instructions=instructions)


def build_uml_instructions_prompt(code: str, instructions: str) -> str:
    return uml_instructions_prompt.format(code=code, instructions=instructions)
