"""Per-challenge rubrics and the illustrative outputs shown on a pass."""

from vibe_progression.models.assessment import RubricEntry

RUBRICS: dict[str, RubricEntry] = {
    "prompt-basics-1": RubricEntry(
        keywords=("hello world", "javascript", "function", "console.log"),
        intent_verbs=("create", "write", "generate", "show"),
        context_terms=("simple", "basic", "tutorial"),
    ),
    "prompt-basics-2": RubricEntry(
        keywords=("nan", "sum", "array", "undefined", "initialize"),
        intent_verbs=("explain", "fix", "debug", "why"),
        context_terms=("error", "math", "loop"),
    ),
    "prompt-basics-3": RubricEntry(
        keywords=("todo", "data structure", "interface", "type", "object", "properties"),
        intent_verbs=("break down", "decompose", "structure", "define"),
        context_terms=("planning", "component", "todo app"),
    ),
    "chain-prompting-1": RubricEntry(
        keywords=("user", "signup", "login", "interface", "function", "auth"),
        intent_verbs=("chain", "sequence", "next", "incremental"),
        context_terms=("authentication", "steps", "flow"),
    ),
    "debug-ai-1": RubricEntry(
        keywords=("await", "fetch", "async", "promise", "json"),
        intent_verbs=("fix", "wait", "solve", "synchronous"),
        context_terms=("api", "network", "loading"),
    ),
    "refactor-ai-1": RubricEntry(
        keywords=("readable", "clean", "descriptive", "types", "interface"),
        intent_verbs=("refactor", "improve", "cleanup", "standardize"),
        context_terms=("best practices", "maintenance", "naming"),
    ),
    "feature-complete-1": RubricEntry(
        keywords=(
            "dark mode", "toggle", "localstorage", "persistence", "react", "hook", "storage",
        ),
        intent_verbs=("complete", "full", "build", "implement"),
        context_terms=("feature", "ux", "state management"),
    ),
}

SAMPLE_OUTPUTS: dict[str, str] = {
    "prompt-basics-1": """\
// AI: Synthesizing Hello World...

function helloWorld() {
    console.log("Hello, World!");
}

// Optimization: Specified language: JavaScript.""",
    "prompt-basics-2": """\
// AI Debug Insight:
// The variable 'total' is undefined in the first iteration.

function sumArray(arr) {
    let total = 0; // Fix: Initialize with 0
    for (let i = 0; i < arr.length; i++) {
        total += arr[i];
    }
    return total;
}""",
    "prompt-basics-3": """\
// AI Structure Design:

interface TodoItem {
    id: string;
    text: string;
    completed: boolean;
    createdAt: Date;
}

// Plan: 1. Define Interface (Done) -> 2. State Management -> 3. UI Implementation""",
    "chain-prompting-1": """\
// AI Chain Step 3/3:

async function login(email, password) {
    const user = await db.user.findUnique({ where: { email } });
    // ... validation logic building on the User interface from Prompt 1
    return { success: true, token: "vibe_..." };
}""",
    "debug-ai-1": """\
// AI Async Correction:

async function fetchUser(id) {
    const response = await fetch('/api/users/' + id); // Added await
    const data = await response.json(); // Added await
    return data;
}""",
    "refactor-ai-1": """\
// AI Refactor Results:

interface ValidationResult {
    isValid: boolean;
    message: string;
}

function validateUserAge(user: User): ValidationResult {
    const isAdult = user.age >= 18;
    return {
        isValid: isAdult && user.name && user.email,
        message: isAdult ? 'User valid' : 'User must be 18+'
    };
}""",
    "feature-complete-1": """\
// AI Feature Synthesis [Dark Mode]:

export function useDarkMode() {
    const [theme, setTheme] = useState(localStorage.getItem('theme') || 'light');

    useEffect(() => {
        document.documentElement.classList.toggle('dark', theme === 'dark');
        localStorage.setItem('theme', theme);
    }, [theme]);

    return [theme, setTheme];
}""",
}

DEFAULT_SAMPLE_OUTPUT = "// AI: Vibe synthesized successfully. Logic verified."
FALLBACK_OUTPUT = "// AI synthesized your request based on the vibes provided."
