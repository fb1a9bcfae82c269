"""Stylesheet and head fragments used by the fallback template and the TOC."""

from __future__ import annotations

DEFAULT_HEAD = (
    '<meta charset="UTF-8">\n'
    '    <meta name="viewport" content="width=device-width, '
    'initial-scale=1.0">'
)

BASE_STYLES = """
        body {
            font-family: 'Microsoft JhengHei', '微軟正黑體', Arial, sans-serif;
            line-height: 1.6;
            margin: 20px;
            background-color: #f8f9fa;
        }
        .container {
            max-width: 1400px;
            margin: 0 auto;
            background: white;
            padding: 30px;
            border-radius: 10px;
            box-shadow: 0 4px 6px rgba(0,0,0,0.1);
        }
        table {
            width: 100%;
            border-collapse: collapse;
            margin: 20px 0;
        }
        th, td {
            padding: 12px 8px;
            border: 1px solid #ddd;
            text-align: left;
        }
        th {
            background: #34495e;
            color: white;
        }
        .japanese { color: #e74c3c; font-weight: bold; }
        .chinese { color: #27ae60; }
        .example {
            background-color: #fff3cd;
            padding: 6px;
            border-radius: 4px;
            margin: 3px 0;
            border-left: 4px solid #ffc107;
        }
        .note {
            background-color: #d1ecf1;
            padding: 10px;
            border-radius: 4px;
            margin: 10px 0;
            border-left: 4px solid #17a2b8;
        }
        .grammar-point {
            background-color: #e8f5e8;
            padding: 8px;
            border-radius: 4px;
            margin: 5px 0;
            border-left: 4px solid #28a745;
        }"""

TOC_STYLES = """
        .toc-dropdown {
            position: relative;
            display: inline-block;
            margin: 20px 0 30px 0;
        }
        .toc-toggle {
            background: linear-gradient(135deg, #4a90e2, #357abd);
            color: white;
            border: none;
            padding: 12px 20px;
            font-size: 16px;
            border-radius: 8px;
            cursor: pointer;
            display: flex;
            align-items: center;
            gap: 10px;
            box-shadow: 0 2px 10px rgba(74, 144, 226, 0.3);
            transition: all 0.3s ease;
            font-family: inherit;
        }
        .toc-toggle:hover {
            background: linear-gradient(135deg, #357abd, #2968a3);
            box-shadow: 0 4px 15px rgba(74, 144, 226, 0.4);
            transform: translateY(-1px);
        }
        .toc-toggle:active {
            transform: translateY(0);
            box-shadow: 0 2px 8px rgba(74, 144, 226, 0.3);
        }
        .toc-icon {
            font-size: 18px;
            font-weight: bold;
        }
        .toc-arrow {
            margin-left: auto;
            transition: transform 0.3s ease;
        }
        .toc-content {
            display: none;
            position: absolute;
            background-color: white;
            min-width: 350px;
            max-width: 500px;
            max-height: 400px;
            overflow-y: auto;
            box-shadow: 0 8px 25px rgba(0,0,0,0.15);
            z-index: 1000;
            border-radius: 8px;
            border: 1px solid #e1e5e9;
            margin-top: 5px;
        }
        .toc-content ul {
            list-style-type: none;
            padding: 10px 0;
            margin: 0;
        }
        .toc-content ul ul {
            padding-left: 20px;
        }
        .toc-content li {
            margin: 0;
        }
        .toc-content a {
            text-decoration: none;
            color: #495057;
            font-size: 14px;
            line-height: 1.4;
            display: block;
            padding: 8px 20px;
            transition: all 0.2s ease;
            border-left: 3px solid transparent;
        }
        .toc-content a:hover {
            background-color: #f8f9fa;
            color: #007bff;
            border-left-color: #007bff;
        }
        .toc-content ul ul a {
            padding-left: 40px;
            font-size: 13px;
            color: #6c757d;
        }
        @media (max-width: 768px) {
            .toc-content {
                min-width: 300px;
                max-width: calc(100vw - 40px);
            }
        }
        .back-to-top {
            text-align: right;
            margin: 10px 0 20px 0;
            font-size: 12px;
        }
        .back-to-top a {
            color: #6c757d;
            text-decoration: none;
            padding: 5px 10px;
            border: 1px solid #dee2e6;
            border-radius: 4px;
            background-color: #f8f9fa;
            transition: all 0.3s ease;
        }
        .back-to-top a:hover {
            color: #495057;
            background-color: #e9ecef;
            border-color: #adb5bd;
            text-decoration: none;
        }"""

DEFAULT_STYLES = BASE_STYLES + TOC_STYLES + "\n"

TOC_SCRIPT = """
    <script>
      function toggleTOC() {
        const content = document.getElementById('toc-content');
        const arrow = document.querySelector('.toc-arrow');
        const isOpen = content.style.display === 'block';
        content.style.display = isOpen ? 'none' : 'block';
        arrow.textContent = isOpen ? '▼' : '▲';
      }

      function closeTOC() {
        const content = document.getElementById('toc-content');
        const arrow = document.querySelector('.toc-arrow');
        content.style.display = 'none';
        arrow.textContent = '▼';
      }

      document.addEventListener('click', function(event) {
        const toc = document.querySelector('.toc-dropdown');
        if (!toc.contains(event.target)) {
          closeTOC();
        }
      });
    </script>"""

TOC_OPEN = """
    <div class="toc-dropdown">
      <button class="toc-toggle" onclick="toggleTOC()">
        <span class="toc-icon">☰</span>
        目錄 / Table of Contents
        <span class="toc-arrow">▼</span>
      </button>
      <div class="toc-content" id="toc-content">
        """

TOC_CLOSE = """
      </div>
    </div>"""

BACK_TO_TOC = (
    '<div class="back-to-top"><a href="javascript:void(0)" '
    "onclick=\"document.querySelector('.toc-toggle').scrollIntoView(); "
    'toggleTOC();">↑ 返回目錄 / Back to TOC</a></div>'
)
