from __future__ import annotations
import streamlit as st
import re
import pandas as pd
import numpy as np
from typing import List
import matplotlib.pyplot as plt
import networkx as nx
import io

from text_ranker.datatypes import Document, RankConfig
from text_ranker.preprocessing import SegmentationError, parse_lemma_lines
from text_ranker.summarize import new_document, generate_summary, select_sentences, word_budget
from text_ranker.graphing import similarity_matrix
from text_ranker.scoring import ranked_indices

def extract_rtf_text(rtf_content):
    """Extract plain text from RTF content."""
    # Remove RTF control words and groups
    text = re.sub(r'\\[a-z]+\d*', '', rtf_content)
    text = re.sub(r'[{}]', '', text)
    text = re.sub(r'\\\*.*?;', '', text)
    text = re.sub(r'\\[^a-z]', '', text)
    text = re.sub(r'\s+', ' ', text)
    return text.strip()

def extract_markdown_text(md_content):
    """Extract plain text from Markdown content."""
    text = re.sub(r'```.*?```', '', md_content, flags=re.DOTALL)
    text = re.sub(r'^#{1,6}\s+', '', text, flags=re.MULTILINE)
    text = re.sub(r'\*{1,2}(.*?)\*{1,2}', r'\1', text)
    text = re.sub(r'\[([^\]]+)\]\([^)]+\)', r'\1', text)
    text = re.sub(r'`([^`]+)`', r'\1', text)
    text = re.sub(r'^-{3,}$', '', text, flags=re.MULTILINE)
    return text.strip()

def load_text_from_file(uploaded_file):
    """Load text content from uploaded file based on file type."""
    file_extension = uploaded_file.name.lower().split('.')[-1]
    content = uploaded_file.read().decode("utf-8")

    if file_extension == 'rtf':
        return extract_rtf_text(content)
    elif file_extension == 'md':
        return extract_markdown_text(content)
    return content

def preview(text: str, size: int = 80) -> str:
    return text[:size] + "..." if len(text) > size else text

def draw_graph_visualization(doc: Document, selected: List[int]):
    """Draw the sentence graph: node size by score, selected sentences highlighted."""
    G = nx.Graph()
    for s in doc.sentences:
        G.add_node(s.idx, score=s.score)
    for i, j, w in doc.graph.edges():
        if w > 0:
            G.add_edge(i, j, weight=w)

    fig, ax = plt.subplots(figsize=(10, 8))
    ax.set_title("Sentence Similarity Graph", fontsize=14, fontweight='bold')

    pos = nx.spring_layout(G, k=2, iterations=50, seed=42)
    scores = [G.nodes[i]['score'] for i in G.nodes()]
    max_score = max(scores) if scores else 1.0
    node_sizes = [400 + 1200 * (sc / max_score) for sc in scores]
    node_colors = ['orange' if i in selected else 'lightblue' for i in G.nodes()]
    nx.draw_networkx_nodes(G, pos, ax=ax, node_color=node_colors, node_size=node_sizes, alpha=0.8)

    weights = [d['weight'] for _, _, d in G.edges(data=True)]
    if weights:
        max_weight = max(weights)
        nx.draw_networkx_edges(G, pos, ax=ax,
                               width=[3 * (w / max_weight) for w in weights],
                               alpha=0.6, edge_color='gray')
        if len(G.nodes) <= 10:
            edge_labels = {(u, v): f"{d['weight']:.2f}" for u, v, d in G.edges(data=True)}
            nx.draw_networkx_edge_labels(G, pos, edge_labels, ax=ax, font_size=8)

    nx.draw_networkx_labels(G, pos, {i: f"S{i+1}" for i in G.nodes()}, ax=ax,
                            font_size=10, font_weight='bold')
    ax.set_aspect('equal')
    ax.axis('off')
    plt.tight_layout()

    buf = io.BytesIO()
    plt.savefig(buf, format='png', dpi=150, bbox_inches='tight')
    buf.seek(0)
    plt.close(fig)
    return buf

def create_sidebar_controls():
    """Create sidebar controls for parameters."""
    st.sidebar.header("Parameters")
    ratio = st.sidebar.slider("Summary length", min_value=0.05, max_value=1.0, value=0.1, step=0.05,
                              help="Fraction of the original text to keep")
    budget = st.sidebar.radio("Budget", ["words", "sentences"],
                              help="Measure summary length in words or in sentences")

    st.sidebar.header("Ranking")
    damping = st.sidebar.slider("Damping factor", min_value=0.05, max_value=0.95, value=0.85, step=0.05)
    threshold = st.sidebar.number_input("Convergence threshold", min_value=0.0, value=0.0001,
                                        step=0.0001, format="%.5f")
    max_iterations = st.sidebar.number_input("Max iterations", min_value=1, value=30, step=1)
    lemma_file = st.sidebar.file_uploader("Lemmatization list (lemma<TAB>word)", type=['txt'])

    st.sidebar.header("Debug Options")
    debug_mode = st.sidebar.checkbox("Enable Debug Mode", value=True, help="Show detailed pipeline steps")

    config = RankConfig(damping_factor=damping, threshold=threshold,
                        max_iterations=int(max_iterations), budget=budget)
    lemma_dict = None
    if lemma_file is not None:
        lemma_dict = parse_lemma_lines(lemma_file.read().decode("utf-8").splitlines())
    return ratio, config, lemma_dict, debug_mode

def debug_pipeline(text: str, ratio: float, config: RankConfig, lemma_dict) -> str:
    """Run the pipeline with detailed debugging information."""
    with st.spinner("Processing text..."):
        doc = new_document(text, lemma_dict=lemma_dict, config=config)

    # Step 1: Segmentation and normalisation
    st.header("Step 1: Segmentation & Normalisation")
    with st.expander("Sentence Details", expanded=True):
        st.success(f"Processed {len(doc.sentences)} sentences")
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Total Sentences", len(doc.sentences))
        with col2:
            st.metric("Total Words", doc.total_word_count)
        with col3:
            st.metric("Lemmatization", "on" if lemma_dict else "off")

        sentences_df = pd.DataFrame([{
            "Sentence #": s.idx + 1,
            "Original Text": preview(s.text),
            "Normalised": preview(s.normalized),
            "Words": s.word_count,
            "Unique Words": len(s.words),
        } for s in doc.sentences])
        st.dataframe(sentences_df, use_container_width=True)

    # Step 2: Similarity graph
    st.header("Step 2: Similarity Graph")
    with st.expander("Graph Details", expanded=True):
        simM = similarity_matrix(doc.graph)
        n = len(simM)
        edges = [w for _, _, w in doc.graph.edges()]
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Nodes (Sentences)", n)
        with col2:
            st.metric("Non-zero Edges", sum(1 for w in edges if w > 0))
        with col3:
            st.metric("Mean Similarity", f"{np.mean(edges):.3f}" if edges else "n/a")

        if n <= 50:
            labels = [f"S{i+1}" for i in range(n)]
            st.dataframe(pd.DataFrame(simM, columns=labels, index=labels), use_container_width=True)
        else:
            st.info(f"Matrix too large to display ({n}×{n} = {n**2:,} cells)")
            st.write(f"Max similarity: {np.max(edges):.3f}, std: {np.std(edges):.3f}")

    # Step 3: Ranking
    st.header("Step 3: Ranking")
    with st.expander("Ranking Details", expanded=True):
        status = "converged" if doc.converged else "stopped at the iteration cap"
        st.success(f"Ranking {status} after {doc.iterations} iterations")
        order = ranked_indices(doc.sentences)
        rank_df = pd.DataFrame([{
            "Rank": r + 1,
            "Sentence #": i + 1,
            "Score": f"{doc.sentences[i].score:.4f}",
            "Total Weight": f"{doc.graph.nodes[i].total_weight:.3f}",
            "Text Preview": preview(doc.sentences[i].text),
        } for r, i in enumerate(order)])
        st.dataframe(rank_df, use_container_width=True)

    # Step 4: Summary selection
    st.header("Step 4: Summary Selection")
    with st.expander("Selection Details", expanded=True):
        selected = select_sentences(doc, ratio)
        summary = generate_summary(doc, ratio)
        col1, col2, col3 = st.columns(3)
        with col1:
            if config.budget == "words":
                st.metric("Word Budget", word_budget(doc, ratio))
            else:
                st.metric("Target Sentences", max(1, int(round(len(doc.sentences) * ratio))))
        with col2:
            st.metric("Selected Sentences", len(selected))
        with col3:
            st.metric("Selected Words", sum(doc.sentences[i].word_count for i in selected))

        if doc.sentences and len(doc.sentences) <= 50:
            try:
                graph_image = draw_graph_visualization(doc, selected)
                st.image(graph_image, caption="Orange nodes are in the summary", use_column_width=True)
            except Exception as e:
                st.error(f"Could not generate graph visualization: {str(e)}")

    return summary

def main():
    st.title("TextRank Summarizer")
    st.write("Upload a text file to generate an extractive summary with weighted TextRank")

    ratio, config, lemma_dict, debug_mode = create_sidebar_controls()

    uploaded_file = st.file_uploader(
        "Choose a text file",
        type=['txt', 'rtf', 'md'],
        help="Upload a text file to summarize (supports .txt, .rtf, .md formats)"
    )

    if uploaded_file is not None:
        text = load_text_from_file(uploaded_file)
        file_extension = uploaded_file.name.lower().split('.')[-1]

        st.subheader(f"Original Text ({file_extension.upper()} format)")
        st.text_area("Content", text, height=200, disabled=True)

        if st.button("Generate Summary", type="primary"):
            try:
                if debug_mode:
                    st.markdown("---")
                    st.title("Pipeline Debug Mode")
                    result = debug_pipeline(text, ratio, config, lemma_dict)
                else:
                    with st.spinner("Generating summary..."):
                        result = generate_summary(new_document(text, lemma_dict=lemma_dict, config=config), ratio)

                st.markdown("---")
                st.header("Final Summary")
                st.text_area("Generated Summary", result, height=150, disabled=True)

                col1, col2, col3 = st.columns(3)
                with col1:
                    st.metric("Original Length", len(text.split()))
                with col2:
                    st.metric("Summary Length", len(result.split()) if result else 0)
                with col3:
                    compression = len(result.split()) / len(text.split()) if text.split() and result else 0
                    st.metric("Actual Compression", f"{compression:.2%}")

            except SegmentationError as e:
                st.error(f"Could not split the text into sentences: {str(e)}")
            except Exception as e:
                st.error(f"Error generating summary: {str(e)}")
                st.exception(e)

if __name__ == "__main__":
    main()
