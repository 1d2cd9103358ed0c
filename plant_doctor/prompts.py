# Fixed prompts sent along with the image. The parsers in
# plant_doctor.services.parsing depend on the answer shapes requested here.

IDENTIFY_PLANT_PROMPT = (
    "Analyze this plant image and provide ONLY a JSON response in exactly this format "
    "without any additional text or code blocks:\n"
    "{\n"
    '  "name": "Common Name",\n'
    '  "scientificName": "Scientific Name",\n'
    '  "description": "Brief description of the plant",\n'
    '  "details": {\n'
    '    "family": "Plant Family",\n'
    '    "nativeRegion": "Native Region",\n'
    '    "growthHabit": "Growth Habit",\n'
    '    "flowerColor": "Flower Color",\n'
    '    "leafType": "Leaf Type",\n'
    '    "soilType": "Soil Type",\n'
    '    "waterNeeds": "Water Needs",\n'
    '    "sunlightRequirements": "Sunlight Requirements",\n'
    '    "temperatureTolerance": "Temperature Tolerance",\n'
    '    "uses": "Common Uses",\n'
    '    "toxicity": "Toxicity Details"\n'
    "  }\n"
    "}"
)

DIAGNOSE_PLANT_PROMPT = (
    "Carefully analyze this plant image. Provide a concise report including: "
    "1) Plant Name, 2) Scientific Name, 3) Potential Diseases (if any), "
    "4) Concise Disease Description, 5) Brief Plant Overview. "
    "Limit each section to 1-2 sentences."
)
