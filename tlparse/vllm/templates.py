"""Static markup shared by the vLLM summary page."""

VLLM_CSS = """
body {
    font-family: Arial, sans-serif;
    margin: 20px;
    background: #f5f5f5;
}
h1 {
    color: #333;
    border-bottom: 2px solid #4a90d9;
    padding-bottom: 10px;
}
h2 {
    color: #4a90d9;
    margin-top: 30px;
}
h3 {
    color: #666;
    margin-top: 20px;
}
.config-table {
    background: white;
    border-collapse: collapse;
    margin: 10px 0;
    box-shadow: 0 1px 3px rgba(0,0,0,0.1);
}
.config-table td, .config-table th {
    padding: 8px 16px;
    border: 1px solid #ddd;
    text-align: left;
}
.config-table tr:nth-child(even) {
    background: #f9f9f9;
}
.compile-range-group {
    margin: 20px 0;
    padding: 15px;
    border-radius: 8px;
    background: white;
    border: 1px solid #ddd;
}
.compile-range-group h3 {
    margin: 0;
}
.submods-container {
    margin-left: 30px;
    margin-top: 15px;
    padding-left: 15px;
    border-left: 2px solid rgba(0,0,0,0.1);
}
.submods-container > summary {
    cursor: pointer;
    font-weight: 500;
    color: #555;
    padding: 5px 0;
}
.subgraph {
    background: rgba(255,255,255,0.7);
    padding: 12px 12px 12px 20px;
    margin: 10px 0 10px 25px;
    border-radius: 5px;
    border: 1px solid rgba(0,0,0,0.1);
}
.subgraph h4 {
    margin: 0 0 8px 0;
    color: #333;
    font-size: 0.95em;
}
.artifact-section {
    margin-top: 10px;
    padding: 10px;
    background: rgba(0, 0, 0, 0.03);
    border-radius: 4px;
}
.artifact-section summary {
    cursor: pointer;
    font-weight: 500;
    color: #666;
}
.artifact-list {
    margin: 10px 0 0 0;
    padding-left: 20px;
    list-style-type: disc;
}
.artifact-list li {
    margin: 4px 0;
}
.artifact-list a, .summary-box a {
    color: #4a90d9;
    text-decoration: none;
}
.artifact-list a:hover, .summary-box a:hover {
    text-decoration: underline;
}
.summary-box {
    background: white;
    padding: 15px;
    margin: 10px 0;
    border-radius: 5px;
    box-shadow: 0 1px 3px rgba(0,0,0,0.1);
}
.banner {
    background: #e8f4fd;
    border: 1px solid #4a90d9;
    border-radius: 5px;
    padding: 10px 15px;
    margin-bottom: 20px;
}
.warning {
    background: #fff3cd;
    border: 1px solid #f1c40f;
    border-radius: 5px;
    padding: 10px 15px;
    margin-bottom: 20px;
}
"""

# Carries the page's query string onto relative links so filters survive navigation
QUERY_PARAM_SCRIPT = """
<script>
(function() {
    var qs = window.location.search;
    if (!qs) { return; }
    document.querySelectorAll("a[href]").forEach(function(a) {
        var href = a.getAttribute("href");
        if (href.indexOf("://") !== -1 || href.indexOf("?") !== -1 || href.charAt(0) === "#") { return; }
        a.setAttribute("href", href + qs);
    });
})();
</script>
"""
