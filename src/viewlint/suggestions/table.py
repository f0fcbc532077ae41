"""Fixed mapping from rule code to suggestion text, impact and effort."""

from dataclasses import dataclass
from typing import Optional

from ..models import Category, Level

HIGH, MEDIUM, LOW = Level.HIGH, Level.MEDIUM, Level.LOW


@dataclass(frozen=True)
class SuggestionTemplate:
    title: str
    category: Category
    impact: Level
    effort: Level
    time_saved_ms: int = 0
    before: Optional[str] = None
    after: Optional[str] = None
    explanation: Optional[str] = None
    # "snippet": one suggestion per distinct evidence; "template": one per file
    scope: str = "template"


# ── Performance ───────────────────────────────────────────────────────

_PERFORMANCE = {
    "n_plus_one": SuggestionTemplate(
        "Add eager loading",
        Category.PERFORMANCE, HIGH, LOW, 500,
        before="{{ collection:blog }}\n  {{ author:name }}\n{{ /collection:blog }}",
        after='{{ collection:blog with="author" }}\n  {{ author:name }}\n{{ /collection:blog }}',
        explanation="Eager loading fetches the relationship once for the whole loop instead of once per item",
        scope="snippet",
    ),
    "query_in_loop": SuggestionTemplate(
        "Move data queries out of loops",
        Category.PERFORMANCE, HIGH, MEDIUM, 500,
        before="@foreach($posts as $post)\n  {{ Entry::query()->where('parent', $post->id)->count() }}\n@endforeach",
        after="// In the controller\n$counts = ...; // one grouped query\n\n@foreach($posts as $post)\n  {{ $counts[$post->id] }}\n@endforeach",
        explanation="One query per iteration grows linearly with the number of items",
        scope="snippet",
    ),
    "unpaginated_loop": SuggestionTemplate(
        "Add pagination to large loops",
        Category.PERFORMANCE, MEDIUM, MEDIUM, 300,
        before='{{ collection:blog limit="200" }}',
        after='{{ collection:blog paginate="10" }}\n  ...\n{{ /collection:blog }}\n{{ paginate }} ... {{ /paginate }}',
        explanation="Pagination caps the entries rendered per page and adds navigation",
        scope="snippet",
    ),
    "nested_loops": SuggestionTemplate(
        "Flatten nested loops",
        Category.PERFORMANCE, MEDIUM, MEDIUM, 200,
        explanation="Group or pre-compute the inner data in the controller so each item is visited once",
        scope="snippet",
    ),
    "high_complexity": SuggestionTemplate(
        "Reduce template complexity",
        Category.MAINTAINABILITY, MEDIUM, HIGH, 100,
        explanation="Smaller templates compile faster and are easier to review",
    ),
    "excessive_partials": SuggestionTemplate(
        "Combine related partials",
        Category.PERFORMANCE, LOW, MEDIUM, 50,
    ),
    "complex_conditional": SuggestionTemplate(
        "Simplify complex conditionals",
        Category.MAINTAINABILITY, LOW, LOW,
        explanation="Compute the condition once and give it a name",
        scope="snippet",
    ),
    "excessive_inline_php": SuggestionTemplate(
        "Move large PHP blocks out of the template",
        Category.MAINTAINABILITY, MEDIUM, MEDIUM,
        scope="snippet",
    ),
    "facade_in_template": SuggestionTemplate(
        "Pass facade data from the controller",
        Category.PERFORMANCE, MEDIUM, LOW, 50,
    ),
    "uncached_dynamic": SuggestionTemplate(
        "Isolate dynamic values so the page can be cached",
        Category.PERFORMANCE, MEDIUM, MEDIUM, 100,
        before="{{ now format=\"Y\" }} in every section",
        after="{{ nocache }}{{ now format=\"Y\" }}{{ /nocache }}",
    ),
    "static_caching": SuggestionTemplate(
        "Cache static header/footer/navigation content",
        Category.PERFORMANCE, MEDIUM, LOW, 100,
        before="<header>{{ nav:main }}</header>",
        after='{{ cache for="1 hour" }}\n<header>{{ nav:main }}</header>\n{{ /cache }}',
        explanation="Caching prevents re-rendering static navigation on every request",
    ),
    "collection_caching": SuggestionTemplate(
        "Cache collection queries",
        Category.PERFORMANCE, MEDIUM, LOW, 200,
        before="{{ collection:blog }} ... {{ /collection:blog }}",
        after='{{ cache for="10 minutes" }}\n{{ collection:blog }} ... {{ /collection:blog }}\n{{ /cache }}',
        scope="snippet",
    ),
    "asset_caching": SuggestionTemplate(
        "Enable asset caching",
        Category.PERFORMANCE, MEDIUM, LOW, 150,
    ),
    "collection_without_params": SuggestionTemplate(
        "Limit collection results",
        Category.PERFORMANCE, MEDIUM, LOW, 100,
        before="{{ collection:blog }}",
        after='{{ collection:blog limit="10" sort="date:desc" }}',
        scope="snippet",
    ),
    "glide_without_params": SuggestionTemplate(
        "Resize images with Glide parameters",
        Category.PERFORMANCE, MEDIUM, LOW, 100,
        before="{{ glide:image }}",
        after='{{ glide:image width="800" quality="80" }}',
    ),
    "inline_styles": SuggestionTemplate(
        "Move inline CSS to a stylesheet",
        Category.PERFORMANCE, LOW, LOW, 50,
    ),
    "inline_scripts": SuggestionTemplate(
        "Move inline JavaScript to an external file",
        Category.PERFORMANCE, LOW, LOW, 50,
    ),
}

# ── Maintainability ───────────────────────────────────────────────────

_MAINTAINABILITY = {
    "long_template": SuggestionTemplate(
        "Extract repeated sections into reusable partials",
        Category.MAINTAINABILITY, MEDIUM, MEDIUM,
        before='<div class="card">\n  <!-- 50+ lines of content -->\n</div>',
        after="{{ partial:card }}",
        explanation="Focused partials are easier to read and reuse",
    ),
    "repeated_markup": SuggestionTemplate(
        "Extract repeated markup into a component",
        Category.MAINTAINABILITY, MEDIUM, MEDIUM,
        scope="snippet",
    ),
    "inline_style_attributes": SuggestionTemplate(
        "Extract inline styles to CSS classes",
        Category.MAINTAINABILITY, LOW, MEDIUM,
        before='<div style="padding: 1rem; border: 1px solid #ccc;">Content</div>',
        after='<div class="card">Content</div>',
        explanation="CSS classes can be reused across templates",
    ),
    "repeated_strings": SuggestionTemplate(
        "Extract repeated strings to variables",
        Category.MAINTAINABILITY, LOW, LOW,
        before='{{ if status == "published" }} ... {{ if status == "published" }}',
        after='{{ published_status = "published" }}\n{{ if status == published_status }}',
    ),
    "unused_variables": SuggestionTemplate(
        "Remove unused variable assignments",
        Category.MAINTAINABILITY, LOW, LOW,
    ),
    "non_semantic_markup": SuggestionTemplate(
        "Use semantic HTML elements",
        Category.ACCESSIBILITY, LOW, LOW,
        before='<div class="header">...</div>',
        after="<header>...</header>",
    ),
    "inline_php": SuggestionTemplate(
        "Move PHP logic out of the template",
        Category.POLICY, MEDIUM, MEDIUM,
        scope="snippet",
    ),
    "facade_call": SuggestionTemplate(
        "Replace facade calls with Statamic tags",
        Category.POLICY, MEDIUM, LOW,
        before="{{ Statamic\\Facades\\Entry::whereCollection('blog') }}",
        after="<x-statamic:entries :from=\"'blog'\">",
        scope="snippet",
    ),
    "prefer_statamic_tags": SuggestionTemplate(
        "Use Statamic tags instead of PHP queries",
        Category.POLICY, MEDIUM, LOW,
        scope="snippet",
    ),
    "models_in_view": SuggestionTemplate(
        "Move model queries to the controller",
        Category.POLICY, MEDIUM, MEDIUM,
        scope="snippet",
    ),
    "database_calls": SuggestionTemplate(
        "Move database access out of the template",
        Category.POLICY, HIGH, MEDIUM, 100,
        scope="snippet",
    ),
    "http_calls": SuggestionTemplate(
        "Move HTTP requests out of the template",
        Category.POLICY, HIGH, MEDIUM, 200,
        scope="snippet",
    ),
}

# ── Security and accessibility ────────────────────────────────────────

_SECURITY = {
    "unescaped_output": SuggestionTemplate(
        "Review unescaped output for XSS vulnerability",
        Category.SECURITY, HIGH, LOW,
        before="{!! $content !!}",
        after="{{ $content }}",
        explanation="Escaped output prevents script injection from user-controlled data",
        scope="snippet",
    ),
    "xss_risk": SuggestionTemplate(
        "Avoid assigning HTML through innerHTML",
        Category.SECURITY, HIGH, LOW,
        before="el.innerHTML = data;",
        after="el.textContent = data;",
        scope="snippet",
    ),
    "insecure_links": SuggestionTemplate(
        "Use HTTPS for external links",
        Category.SECURITY, LOW, LOW,
        before='<a href="http://example.com">',
        after='<a href="https://example.com">',
    ),
    "missing_alt_text": SuggestionTemplate(
        "Add alt attributes to images",
        Category.ACCESSIBILITY, MEDIUM, LOW,
        before='<img src="photo.jpg">',
        after='<img src="photo.jpg" alt="Description">',
        explanation="Screen readers announce the alt text in place of the image",
    ),
    "non_descriptive_link": SuggestionTemplate(
        "Use descriptive link text",
        Category.ACCESSIBILITY, LOW, LOW,
        before='<a href="/post">Read more</a>',
        after='<a href="/post">Read more about {{ title }}</a>',
    ),
    "missing_form_label": SuggestionTemplate(
        "Label form inputs",
        Category.ACCESSIBILITY, MEDIUM, LOW,
        before='<input type="email" name="email">',
        after='<label for="email">Email</label>\n<input type="email" id="email" name="email">',
    ),
}

SUGGESTION_TABLE: dict[str, SuggestionTemplate] = {**_PERFORMANCE, **_MAINTAINABILITY, **_SECURITY}

# optimization_focus -> suggestion categories it selects
FOCUS_CATEGORIES: dict[str, frozenset] = {
    "performance": frozenset({Category.PERFORMANCE}),
    "maintainability": frozenset({Category.MAINTAINABILITY, Category.POLICY}),
    "security": frozenset({Category.SECURITY}),
    "all": frozenset(Category),
}


def template_for(rule_code: str) -> Optional[SuggestionTemplate]:
    return SUGGESTION_TABLE.get(rule_code)
